from sqlalchemy import Column, Integer, String, DateTime, Text, Index, func
from scavenger_dashboard.models.database import Base, StructuredJSON


class ApiCallRecord(Base):
    """Исходящий вызов воркера к API задач/решений (таблица api_return)"""
    __tablename__ = "api_return"

    id = Column(Integer, primary_key=True)
    container_id = Column(String)
    miner_id = Column(String)
    wallet_addr = Column(String)
    endpoint = Column(String, nullable=False)  # '/challenge', '/solution', ...
    url = Column(Text, nullable=False)  # полный URL запроса
    timestamp = Column(DateTime, nullable=False, server_default=func.now())
    payload = Column(StructuredJSON)  # тело запроса
    api_response = Column(StructuredJSON)  # сырой ответ API, может быть битым
    description = Column(Text)

    __table_args__ = (
        Index("idx_api_wallet_addr", "wallet_addr"),
        Index("idx_api_endpoint_time", "endpoint", timestamp.desc()),
        Index("idx_api_miner_endpoint", "miner_id", "endpoint"),
        Index("idx_api_timestamp", "timestamp"),
    )

    def __repr__(self):
        return f"<ApiCallRecord {self.container_id} {self.endpoint} @ {self.timestamp}>"
