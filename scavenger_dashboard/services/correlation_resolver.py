"""
Корреляция решений с задачами: challenge_id из URL отправки решения
сопоставляется с метаданными из ответов /challenge.
"""
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional

from scavenger_dashboard.utils.constants import (
    DEFAULT_SHORT_WINDOW,
    ENDPOINT_SOLUTION,
    CHALLENGE_RESPONSE_KEY,
)
from scavenger_dashboard.utils.helpers import (
    dig,
    parse_int,
    parse_text,
    parse_timestamp,
    start_of_day_utc,
    to_naive_utc,
)
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)

# .../solution/<wallet_addr>/<challenge_id>/<nonce>
SOLUTION_URL_PATTERN = re.compile(r"/solution/[^/]+/([^/]+)/")


@dataclass(frozen=True)
class ChallengeContext:
    """Метаданные задачи из ответа /challenge"""
    challenge_id: str
    difficulty: Optional[str] = None
    day: Optional[int] = None
    issued_at: Optional[datetime] = None


@dataclass(frozen=True)
class SolutionActivity:
    """Отправки решений контейнера и текущая задача"""
    container_id: Optional[str]
    solutions_short: int = 0
    solutions_daily: int = 0
    challenge_id: Optional[str] = None
    challenge: Optional[ChallengeContext] = None


# ========== ЧИСТЫЕ ФУНКЦИИ ==========

def extract_challenge_id(url: Optional[str]) -> Optional[str]:
    """
    challenge_id из URL отправки решения

    Args:
        url: Например https://host/solution/addr/chal42/nonce

    Returns:
        Сегмент пути после /solution/<wallet>/ или None, если URL другой формы
    """
    if not url:
        return None
    match = SOLUTION_URL_PATTERN.search(url)
    return match.group(1) if match else None


def parse_challenge_context(api_response: Any) -> Optional[ChallengeContext]:
    """Метаданные задачи из api_response; None если challenge_id нет"""
    challenge = dig(api_response, CHALLENGE_RESPONSE_KEY)
    challenge_id = parse_text(dig(challenge, "challenge_id"))
    if challenge_id is None:
        return None

    return ChallengeContext(
        challenge_id=challenge_id,
        difficulty=parse_text(dig(challenge, "difficulty")),
        day=parse_int(dig(challenge, "day")),
        issued_at=parse_timestamp(dig(challenge, "issued_at"))
    )


def latest_call_per_container(calls: Iterable[Any]) -> Dict[Optional[str], Any]:
    """Самый свежий вызов каждого контейнера (timestamp, затем id)"""
    latest: Dict[Optional[str], Any] = {}
    for call in calls:
        current = latest.get(call.container_id)
        if current is None or (call.timestamp, call.id) > (current.timestamp, current.id):
            latest[call.container_id] = call
    return latest


def index_challenges(rows: Iterable[Any]) -> Dict[str, ChallengeContext]:
    """
    Первая запись на каждый challenge_id.

    Строки должны приходить от свежих к старым, тогда при нескольких
    записях одной задачи побеждает самая свежая.
    """
    contexts: Dict[str, ChallengeContext] = {}
    for row in rows:
        context = parse_challenge_context(row.api_response)
        if context is not None and context.challenge_id not in contexts:
            contexts[context.challenge_id] = context
    return contexts


# ========== РЕЗОЛВЕР ==========

class CorrelationResolver:
    """Счётчики решений и контекст текущей задачи по контейнерам"""

    def __init__(self, store, window: timedelta = DEFAULT_SHORT_WINDOW):
        if window <= timedelta(0):
            raise ValueError(f"Окно должно быть положительным: {window}")
        self.store = store
        self.window = window

    async def resolve(self, now: datetime) -> Dict[Optional[str], SolutionActivity]:
        """
        Активность решений на момент now

        Args:
            now: Момент расчёта (UTC)

        Returns:
            container_id -> SolutionActivity для контейнеров с решениями за сутки
            или в коротком окне
        """
        now = to_naive_utc(now)
        short_calls = list(await self.store.fetch_api_calls(ENDPOINT_SOLUTION, now - self.window))
        daily_calls = await self.store.fetch_api_calls(ENDPOINT_SOLUTION, start_of_day_utc(now))

        short_counts = Counter(call.container_id for call in short_calls)
        daily_counts = Counter(call.container_id for call in daily_calls)

        current_ids = {
            container_id: extract_challenge_id(call.url)
            for container_id, call in latest_call_per_container(short_calls).items()
        }

        wanted = {challenge_id for challenge_id in current_ids.values() if challenge_id}
        contexts = index_challenges(await self.store.fetch_challenges(wanted)) if wanted else {}

        activity: Dict[Optional[str], SolutionActivity] = {}
        for container_id in set(short_counts) | set(daily_counts):
            challenge_id = current_ids.get(container_id)
            activity[container_id] = SolutionActivity(
                container_id=container_id,
                solutions_short=short_counts.get(container_id, 0),
                solutions_daily=daily_counts.get(container_id, 0),
                challenge_id=challenge_id,
                challenge=contexts.get(challenge_id) if challenge_id else None
            )

        unresolved = [c for c, cid in current_ids.items() if cid and cid not in contexts]
        if unresolved:
            logger.debug(
                "Задачи не найдены для части контейнеров",
                event="challenge_unresolved",
                containers=len(unresolved)
            )

        return activity
