from sqlalchemy import Column, Integer, String, DateTime, Float, Text, Index, func
from scavenger_dashboard.models.database import Base


class HashrateSample(Base):
    """Мгновенный замер хэшрейта одного воркера (таблица stats)"""
    __tablename__ = "stats"

    id = Column(Integer, primary_key=True)
    container_id = Column(String)
    miner_id = Column(String)
    hash_rate = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False, server_default=func.now())
    description = Column(Text)

    __table_args__ = (
        Index("idx_stats_timestamp", "timestamp"),
        Index("idx_stats_miner_time", "miner_id", timestamp.desc()),
    )

    def __repr__(self):
        return f"<HashrateSample {self.container_id}/{self.miner_id} {self.hash_rate} @ {self.timestamp}>"
