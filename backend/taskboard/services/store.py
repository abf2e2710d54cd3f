from contextlib import asynccontextmanager
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import StoreFailure, ValidationError
from taskboard.core.logs import get_logger
from taskboard.models.user import User

log = get_logger("store")


@asynccontextmanager
async def store_guard(db: AsyncSession, operation: str):
    """Roll back and re-raise database errors as ``StoreFailure``."""
    try:
        yield
    except SQLAlchemyError as exc:
        log.error("Store failure during %s: %s", operation, exc)
        await db.rollback()
        raise StoreFailure(operation) from exc


async def ensure_users_exist(db: AsyncSession, user_ids: Iterable[int], field: str):
    wanted = set(user_ids)
    if not wanted:
        return
    async with store_guard(db, "lookup_users"):
        result = await db.execute(select(User.id).where(User.id.in_(wanted)))
        found = set(result.scalars().all())
    missing = sorted(wanted - found)
    if missing:
        raise ValidationError.for_field(field, "unknown_user", ids=missing)
