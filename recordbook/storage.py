"""
Recordbook — Record Storage (Persistence Adapter)
===================================================

What:  Reads and writes the whole record collection as a single JSON document.
How:   Every operation re-reads the file; there is no in-memory cache that
       outlives a request. Writes replace the file in one rename.
Who:   Injected into route handlers via FastAPI's dependency system
       (`get_record_store`) and passed down to the service layer.
When:  Once per load/store call, i.e. at least once per request.

Storage Contract:
    RecordStore (abstract)
    ├── load()           → list[Record] (empty on an unreadable file, StorageError on a bad entry)
    ├── store(records)   → None (raises StorageError when the write fails)
    └── lock             → asyncio.Lock guarding read-modify-write cycles

    Handlers only see this interface, so the flat file can later be swapped
    for an embedded database without touching routes or services.

Known limitations:
    - A file that exists but cannot be read or parsed is logged and treated
      as an empty collection. The next successful write replaces it.
    - A well-formed array holding an entry without a usable id raises
      StorageError instead, so such a file is never overwritten.
    - The lock only serializes writers inside one process. Two processes
      pointed at the same file can still overwrite each other.
"""

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union

import aiofiles
from pydantic import ValidationError as PydanticValidationError

from recordbook.config import settings
from recordbook.exceptions import StorageError
from recordbook.schemas.record import Record

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Abstract persistence interface for the record collection.

    Contract:
        - load() returns the full collection in insertion order
        - store() replaces the full collection
        - Callers that load, mutate and store must hold `lock` for the
          whole cycle
    """

    def __init__(self) -> None:
        self.lock = asyncio.Lock()

    @abstractmethod
    async def load(self) -> List[Record]:
        """Return every stored record, oldest first."""
        ...

    @abstractmethod
    async def store(self, records: List[Record]) -> None:
        """Persist `records` as the complete collection."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True when the backing storage can be read (or created) cleanly."""
        ...


class JsonFileStore(RecordStore):
    """
    RecordStore backed by one pretty-printed JSON file.

    File format:
        [
          {
            "id": 1,
            "title": "A",
            "description": "d",
            "startDate": "2024-01-01T00:00:00.000Z",
            "endDate": "2024-01-02T00:00:00.000Z",
            "status": "open"
          }
        ]
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)

    @property
    def _temp_path(self) -> Path:
        return self.path.with_name(f".{self.path.name}.tmp")

    async def _read_documents(self) -> list:
        """Read and decode the file, raising on any problem."""
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            raw = await f.read()
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, found {type(data).__name__}")
        return data

    async def _write_text(self, text: str) -> None:
        """Write `text` to a sibling temp file, then rename it over the target."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._temp_path
        async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
            await f.write(text)
        os.replace(temp_path, self.path)

    async def load(self) -> List[Record]:
        """
        Load the whole collection.

        Missing file:  created with `[]`, returns [] (StorageError if that fails).
        Corrupt file:  error logged, returns [].
        Bad entry:     StorageError; reads and writes fail until the file is fixed.
        """
        if not self.path.exists():
            try:
                await self._write_text("[]")
            except OSError as e:
                logger.error("Could not create data file %s: %s", self.path, str(e))
                raise StorageError(
                    message="Could not initialize record storage.",
                    context={"path": str(self.path), "os_error": str(e)},
                )
            logger.info("Created empty data file: %s", self.path)
            return []

        try:
            documents = await self._read_documents()
        except (OSError, ValueError) as e:
            # ValueError covers JSON, unicode and non-array documents
            logger.error("Error reading the data file %s: %s", self.path, str(e))
            return []

        try:
            return [Record.model_validate(doc) for doc in documents]
        except PydanticValidationError as e:
            logger.error("Data file %s holds an entry without a usable id: %s", self.path, str(e))
            raise StorageError(
                message="Could not read records. The data file contains an invalid entry.",
                context={"path": str(self.path)},
            )

    async def store(self, records: List[Record]) -> None:
        """
        Overwrite the file with `records`, 2-space indented.

        Raises:
            StorageError: the file could not be written. The previous
            contents stay in place because the rename never happened.
        """
        text = json.dumps(
            [record.to_document() for record in records],
            indent=2,
            ensure_ascii=False,
        )
        try:
            await self._write_text(text)
        except OSError as e:
            logger.error("Error saving records to %s: %s", self.path, str(e))
            raise StorageError(context={"path": str(self.path), "os_error": str(e)})
        logger.debug("Stored %d records to %s", len(records), self.path)

    async def health_check(self) -> bool:
        if not self.path.exists():
            return os.access(self.path.parent.resolve(), os.W_OK)
        try:
            documents = await self._read_documents()
            for doc in documents:
                Record.model_validate(doc)
        except (OSError, ValueError) as e:
            logger.warning("Health check: data file unusable: %s", str(e))
            return False
        return True


# ── Default Store ─────────────────────────────────────────────────────────
# One instance per process so every request shares the same lock.
record_store = JsonFileStore(settings.data_path)


def get_record_store() -> RecordStore:
    """
    FastAPI dependency that provides the process-wide record store.

    Tests replace it through `app.dependency_overrides[get_record_store]`.
    """
    return record_store
