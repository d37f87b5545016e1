from .event_store import EventStore
from .window_aggregator import WindowAggregator
from .correlation_resolver import CorrelationResolver, extract_challenge_id
from .report_composer import ReportComposer

__all__ = [
    "EventStore",
    "WindowAggregator",
    "CorrelationResolver",
    "extract_challenge_id",
    "ReportComposer"
]
