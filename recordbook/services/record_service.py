"""
Recordbook — Record Service (Business Logic)
==============================================

What:  The four record operations: list, get, update, create.
How:   Each call loads the full collection from the store, scans it linearly,
       mutates it in memory and (for writes) stores it back.
Who:   Called by the route handlers in routes/records.py.

Write Flow (PUT /records/{id}, POST /save):
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
    │  Check   │───▶│   Load   │───▶│  Mutate  │───▶│  Store   │
    │ (create) │    │ (file)   │    │ (memory) │    │ (file)   │
    └──────────┘    └──────────┘    └──────────┘    └──────────┘
                    └──────────── store.lock held ─────────────┘

    The lock keeps two concurrent writers in this process from both working
    off the same snapshot and silently dropping one another's change.

Design Decision:
    RecordService holds no state of its own; the store is passed into every
    call, the same way a database session would be.
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from recordbook.exceptions import NotFoundError, ValidationError
from recordbook.schemas.record import Record, RecordPayload, parse_timestamp
from recordbook.storage import RecordStore

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_record_id(raw: str) -> Optional[int]:
    """
    Parse a path segment into a record id, reading leading digits only.

    "7" → 7, " 7 " → 7, "7abc" → 7, "abc" → None, "" → None.
    None never matches a record, so callers answer 404.
    """
    match = _LEADING_INT.match(raw or "")
    if not match:
        return None
    return int(match.group(1))


def next_record_id(records: List[Record]) -> int:
    """max(existing ids) + 1, or 1 for an empty collection."""
    if not records:
        return 1
    return max(record.id for record in records) + 1


# A date sent as an explicit null is stored as the epoch; an absent one stays null.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _payload_timestamp(payload: RecordPayload, name: str) -> Optional[datetime]:
    value = getattr(payload, name)
    if value is None and name in payload.model_fields_set:
        return EPOCH
    return parse_timestamp(value)


def _build_record(record_id: int, payload: RecordPayload) -> Record:
    return Record(
        id=record_id,
        title=payload.title,
        description=payload.description,
        start_date=_payload_timestamp(payload, "start_date"),
        end_date=_payload_timestamp(payload, "end_date"),
        status=payload.status,
    )


class RecordService:
    """
    Business logic layer for record operations.

    Responsibilities:
        - list_records(): everything, in insertion order
        - get_record(): single record or NotFoundError
        - update_record(): full replacement of every field except id
        - create_record(): presence check, id assignment, append
    """

    async def list_records(self, store: RecordStore) -> List[Record]:
        return await store.load()

    async def get_record(self, store: RecordStore, record_id: Optional[int]) -> Record:
        """
        Retrieve a single record by id.

        Raises:
            NotFoundError: no record carries `record_id` (→ 404)
        """
        records = await store.load()
        for record in records:
            if record_id is not None and record.id == record_id:
                return record
        raise NotFoundError(resource_id=record_id)

    async def update_record(
        self,
        store: RecordStore,
        record_id: Optional[int],
        payload: RecordPayload,
    ) -> Record:
        """
        Replace the record with `record_id` using the request body.

        Fields are not validated: anything missing from the body is stored
        as null. The file is left untouched when the id is absent.

        Raises:
            NotFoundError: no record carries `record_id` (→ 404)
            StorageError: the updated collection could not be written (→ 500)
        """
        async with store.lock:
            records = await store.load()
            index = next(
                (i for i, record in enumerate(records) if record_id is not None and record.id == record_id),
                None,
            )
            if index is None:
                raise NotFoundError(resource_id=record_id)

            updated = _build_record(record_id, payload)
            records[index] = updated
            await store.store(records)

        logger.info("Record %d updated", record_id)
        return updated

    async def create_record(self, store: RecordStore, payload: RecordPayload) -> Record:
        """
        Append a new record built from the request body.

        Every field must be present and truthy. The new id is
        max(existing) + 1, so gaps left by manual edits are never reused.

        Raises:
            ValidationError: a required field is missing (→ 400), nothing written
            StorageError: the collection could not be written (→ 500)
        """
        missing = payload.missing_fields()
        if missing:
            raise ValidationError(fields=missing)

        async with store.lock:
            records = await store.load()
            record = _build_record(next_record_id(records), payload)
            records.append(record)
            await store.store(records)

        logger.info("Record %d created (%d total)", record.id, len(records))
        return record


# ── Singleton Instance ────────────────────────────────────────────────────
record_service = RecordService()
