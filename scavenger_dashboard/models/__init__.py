"""
Инициализация моделей - избегаем циклических импортов
"""
from scavenger_dashboard.models.database import Base
from scavenger_dashboard.models.hashrate_sample import HashrateSample
from scavenger_dashboard.models.api_call_record import ApiCallRecord

__all__ = ['Base', 'HashrateSample', 'ApiCallRecord']
