from __future__ import annotations

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_or_ignore(session: AsyncSession, model: type, *, conflict_on: list[str], **values: Any):
    """INSERT ... ON CONFLICT (<conflict_on>) DO NOTHING for the session's dialect."""
    dialect = session.bind.dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"insert_or_ignore is not supported for dialect {dialect!r}")
    return insert(model).values(**values).on_conflict_do_nothing(index_elements=conflict_on)
