"""
Константы для всего приложения
"""
from datetime import timedelta

# ========== ENDPOINT'Ы ВЫШЕСТОЯЩЕГО API ==========
ENDPOINT_CHALLENGE = "/challenge"
ENDPOINT_SOLUTION = "/solution"

# Ключ в api_response записи /challenge, где лежат метаданные задачи
CHALLENGE_RESPONSE_KEY = "challenge"

# ========== ОКНА АГРЕГАЦИИ ==========
DEFAULT_SHORT_WINDOW = timedelta(minutes=10)
MIN_WINDOW_MINUTES = 1
MAX_WINDOW_MINUTES = 24 * 60

# ========== ОКРУГЛЕНИЕ ==========
SHARE_PCT_DIGITS = 2

# ========== СЕРВИС ==========
SERVICE_NAME = "Scavenger Fleet Dashboard"
SERVICE_VERSION = "1.0.0"
API_VERSION = "v1"
