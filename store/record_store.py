# store/record_store.py
"""
Generic keyed-record persistence over the collection tables.

Every operation runs in its own short transaction; nothing here is atomic
across calls, so check-then-act sequences belong to the workflows. Each
write is followed by a best-effort audit entry that can never fail the
write itself.
"""
import json
import secrets
import time
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.clock import Clock
from core.errors import ConflictError, DuplicateError, NotFoundError, ValidationError
from core.logging import get_logger
from db_models import AUDIT_LOG, COLLECTIONS, SETTINGS, AuditAction, Collection
from . import queries
from .flags import AUDIT_TOGGLE_KEY, parse_flag

logger = get_logger("store")

Record = dict[str, Any]


def _new_entry_id() -> str:
    # Sortable by write time; random suffix breaks ties
    return f"{time.time_ns():020d}{secrets.token_hex(6)}"


def _snapshot(record: Record | None) -> str:
    if record is None:
        return ""
    return json.dumps(record, default=str, sort_keys=True)


class RecordStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Clock | None = None,
        audit_default: bool = True,
    ):
        self.session_factory = session_factory
        self.clock = clock or Clock()
        self.audit_default = audit_default

    # ---------- Schema ----------

    def collection(self, name: str) -> Collection:
        try:
            return COLLECTIONS[name]
        except KeyError:
            raise NotFoundError(f"Collection not found: {name}") from None

    def _check_columns(self, collection: Collection, columns) -> None:
        for column in columns:
            if not collection.has_column(column):
                raise NotFoundError(f"Column not found in {collection.name}: {column}")

    # ---------- Reads ----------

    async def get_all(self, name: str) -> list[Record]:
        """Full scan; an empty collection yields an empty list."""
        collection = self.collection(name)
        async with self.session_factory() as session:
            result = await session.execute(queries.select_all(collection))
            return [dict(row) for row in result.mappings().all()]

    async def get_one(self, name: str, key_column: str, key_value: Any) -> Record | None:
        collection = self.collection(name)
        self._check_columns(collection, [key_column])
        async with self.session_factory() as session:
            return await self._first_match(session, collection, key_column, key_value)

    async def search(
        self,
        name: str,
        filters: dict[str, Any] | None = None,
        text: str | None = None,
    ) -> list[Record]:
        collection = self.collection(name)
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        self._check_columns(collection, filters)
        async with self.session_factory() as session:
            result = await session.execute(queries.search_query(collection, filters, text))
            return [dict(row) for row in result.mappings().all()]

    async def _first_match(
        self,
        session: AsyncSession,
        collection: Collection,
        key_column: str,
        key_value: Any,
    ) -> Record | None:
        result = await session.execute(queries.select_matching(collection, key_column, key_value))
        row = result.mappings().first()
        return dict(row) if row is not None else None

    # ---------- Writes ----------

    async def insert(self, name: str, record: Record, actor: str = "system") -> Record:
        """
        Insert a record in declared column order.

        Missing columns are written empty; system stamp fields are filled in.
        """
        collection = self.collection(name)
        self._check_columns(collection, record)

        key_value = record.get(collection.key_column)
        if key_value is None or key_value == "":
            raise ValidationError.missing(collection.key_column)

        if collection.stamped:
            record = {**record, "created_at": self.clock.now(), "created_by": actor}

        row = {
            column: record[column] if column in record else collection.empty_value(column)
            for column in collection.columns
        }

        async with self.session_factory() as session:
            session.add(collection.model(**row))
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateError(
                    f"Record already exists in {collection.name}: {key_value}"
                ) from exc
            stored = await self._first_match(session, collection, collection.key_column, key_value)

        logger.debug("record_inserted", extra={"collection": name, "key": key_value, "actor": actor})
        await self._audit(collection, AuditAction.CREATE, str(key_value), actor, None, stored)
        return stored

    async def update(
        self,
        name: str,
        key_column: str,
        key_value: Any,
        patch: Record,
        actor: str = "system",
    ) -> Record:
        """
        Patch the first row whose `key_column` equals `key_value`.

        Only columns present in `patch` are written. Returns the row after
        the update.
        """
        collection = self.collection(name)
        self._check_columns(collection, [key_column, *patch])
        pk = collection.key_column

        async with self.session_factory() as session:
            before = await self._first_match(session, collection, key_column, key_value)
            if before is None:
                raise NotFoundError(f"Record not found in {collection.name}: {key_value}")

            values = dict(patch)
            if pk in values:
                if values[pk] != before[pk]:
                    raise ConflictError(f"Key column {pk} cannot be changed")
                del values[pk]
            if collection.stamped:
                values["modified_at"] = self.clock.now()
                values["modified_by"] = actor

            await session.execute(queries.update_by_key(collection, before[pk], values))
            await session.commit()
            after = await self._first_match(session, collection, pk, before[pk])

        logger.debug("record_updated", extra={"collection": name, "key": before[pk], "actor": actor})
        await self._audit(collection, AuditAction.UPDATE, str(before[pk]), actor, before, after)
        return after

    async def delete(
        self,
        name: str,
        key_column: str,
        key_value: Any,
        actor: str = "system",
    ) -> Record:
        """Remove the first row whose `key_column` equals `key_value`; return it."""
        collection = self.collection(name)
        self._check_columns(collection, [key_column])
        pk = collection.key_column

        async with self.session_factory() as session:
            removed = await self._first_match(session, collection, key_column, key_value)
            if removed is None:
                raise NotFoundError(f"Record not found in {collection.name}: {key_value}")
            await session.execute(queries.delete_by_key(collection, removed[pk]))
            await session.commit()

        logger.debug("record_deleted", extra={"collection": name, "key": removed[pk], "actor": actor})
        await self._audit(collection, AuditAction.DELETE, str(removed[pk]), actor, removed, None)
        return removed

    # ---------- Audit trail ----------

    async def _audit_enabled(self, session: AsyncSession) -> bool:
        setting = await self._first_match(session, SETTINGS, "key", AUDIT_TOGGLE_KEY)
        return parse_flag(setting["value"] if setting else None, self.audit_default)

    async def _audit(
        self,
        collection: Collection,
        action: AuditAction,
        record_key: str,
        actor: str,
        before: Record | None,
        after: Record | None,
    ) -> None:
        if not collection.audited:
            return
        try:
            async with self.session_factory() as session:
                if not await self._audit_enabled(session):
                    return
                session.add(
                    AUDIT_LOG.model(
                        entry_id=_new_entry_id(),
                        timestamp=self.clock.now(),
                        actor=actor,
                        action=action.value,
                        collection=collection.name,
                        record_key=record_key,
                        before_snapshot=_snapshot(before),
                        after_snapshot=_snapshot(after),
                    )
                )
                await session.commit()
        except Exception:
            logger.exception(
                "audit_log_failed",
                extra={"collection": collection.name, "key": record_key, "action": action.value},
            )

    async def audit_entries(
        self,
        collection: str | None = None,
        record_key: str | None = None,
    ) -> list[Record]:
        async with self.session_factory() as session:
            result = await session.execute(queries.select_audit_entries(collection, record_key))
            return [dict(row) for row in result.mappings().all()]
