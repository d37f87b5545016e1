"""
Вспомогательные представления (только PostgreSQL, DISTINCT ON)
"""
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

LATEST_HASHRATE_VIEW = """
CREATE OR REPLACE VIEW latest_hashrate AS
SELECT DISTINCT ON (container_id)
    container_id,
    miner_id,
    hash_rate,
    timestamp
FROM stats
ORDER BY container_id, timestamp DESC
"""

LATEST_API_CALLS_VIEW = """
CREATE OR REPLACE VIEW latest_api_calls AS
SELECT DISTINCT ON (wallet_addr, endpoint)
    container_id,
    miner_id,
    wallet_addr,
    endpoint,
    timestamp,
    description,
    api_response
FROM api_return
ORDER BY wallet_addr, endpoint, timestamp DESC
"""

VIEWS = (LATEST_HASHRATE_VIEW, LATEST_API_CALLS_VIEW)


async def create_views(conn: AsyncConnection) -> bool:
    """Создать представления, если диалект их поддерживает"""
    if conn.dialect.name != "postgresql":
        return False
    for ddl in VIEWS:
        await conn.execute(text(ddl))
    return True
