"""
Dialect-aware INSERT ... ON CONFLICT helpers.

PostgreSQL in production and SQLite in tests both support ON CONFLICT on a
unique index; the insert construct is picked from the session's bind.
"""

from typing import Any, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession


def _insert_for(session: AsyncSession, table: Any):
    bind = session.get_bind()
    dialect_name = getattr(getattr(bind, "dialect", None), "name", "")

    if "postgresql" in str(dialect_name):
        from sqlalchemy.dialects.postgresql import insert as _pg_insert

        return _pg_insert(table)

    from sqlalchemy.dialects.sqlite import insert as _sqlite_insert

    return _sqlite_insert(table)


async def insert_ignore(
    session: AsyncSession, table: Any, values: Dict[str, Any], index_elements: List[str]
) -> int:
    """INSERT ... ON CONFLICT DO NOTHING; returns the number of inserted rows"""
    stmt = _insert_for(session, table).values(**values)
    stmt = stmt.on_conflict_do_nothing(index_elements=index_elements)
    result = await session.execute(stmt)
    return result.rowcount or 0


async def upsert(
    session: AsyncSession,
    table: Any,
    values: Dict[str, Any],
    index_elements: List[str],
    update_columns: Optional[List[str]] = None,
) -> None:
    """INSERT ... ON CONFLICT DO UPDATE of update_columns from the excluded row"""
    stmt = _insert_for(session, table).values(**values)
    columns = update_columns or [key for key in values if key not in index_elements]
    stmt = stmt.on_conflict_do_update(
        index_elements=index_elements,
        set_={column: getattr(stmt.excluded, column) for column in columns},
    )
    await session.execute(stmt)
