"""
Scavenger Fleet Dashboard - оконная агрегация хэшрейта и решений по воркерам
"""
__version__ = "1.0.0"
