"""
Recordbook — JSON File Store Tests
====================================

What:  Tests for JsonFileStore load/store behaviour against a real temp file.

What we test:
    ✅ Missing file is created with an empty array
    ✅ Corrupt or non-array files degrade to an empty collection
    ✅ Non-string field values load unchanged; an entry without an id raises
    ✅ Writes are 2-space indented and leave no temp file behind
    ✅ Round-trip keeps every field (dates compare equal)
    ✅ Unwritable locations raise StorageError
"""

import json
from datetime import datetime, timezone

import pytest

from recordbook.exceptions import StorageError
from recordbook.schemas.record import Record
from recordbook.storage import JsonFileStore


def _record(record_id, **overrides):
    fields = {
        "id": record_id,
        "title": f"Record {record_id}",
        "description": "desc",
        "start_date": datetime(2024, 1, record_id, 9, 30, tzinfo=timezone.utc),
        "end_date": datetime(2024, 2, record_id, 17, 0, tzinfo=timezone.utc),
        "status": "open",
    }
    fields.update(overrides)
    return Record(**fields)


class TestLoad:
    """Tests for JsonFileStore.load()."""

    @pytest.mark.asyncio
    async def test_missing_file_is_created_empty(self, record_store, data_file):
        assert not data_file.exists()

        records = await record_store.load()

        assert records == []
        assert data_file.exists()
        assert json.loads(data_file.read_text(encoding="utf-8")) == []

    @pytest.mark.asyncio
    async def test_missing_parent_directories_are_created(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "records.json"
        store = JsonFileStore(path)

        assert await store.load() == []
        assert path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_file_returns_empty_and_is_left_alone(self, record_store, data_file):
        data_file.write_text("{not json", encoding="utf-8")

        assert await record_store.load() == []
        assert data_file.read_text(encoding="utf-8") == "{not json"

    @pytest.mark.asyncio
    async def test_non_array_document_returns_empty(self, record_store, data_file):
        data_file.write_text('{"id": 1}', encoding="utf-8")

        assert await record_store.load() == []

    @pytest.mark.asyncio
    async def test_entry_without_id_raises_and_keeps_file(self, record_store, write_records, data_file):
        write_records([{"id": 1, "title": "ok"}, {"title": "no id"}])
        before = data_file.read_bytes()

        with pytest.raises(StorageError):
            await record_store.load()
        assert data_file.read_bytes() == before

    @pytest.mark.asyncio
    async def test_non_string_fields_are_kept(self, record_store, write_records):
        write_records([
            {"id": 1, "title": "keep me"},
            {"id": 2, "title": 123, "description": True, "status": ["open"]},
        ])

        records = await record_store.load()

        assert [r.id for r in records] == [1, 2]
        assert records[0].title == "keep me"
        assert records[1].title == 123
        assert records[1].description is True
        assert records[1].status == ["open"]

    @pytest.mark.asyncio
    async def test_non_string_fields_survive_a_store(self, record_store, write_records, data_file):
        write_records([{"id": 2, "title": 123, "status": "open"}])

        records = await record_store.load()
        await record_store.store(records)

        saved = json.loads(data_file.read_text(encoding="utf-8"))
        assert saved[0]["title"] == 123
        assert saved[0]["status"] == "open"

    @pytest.mark.asyncio
    async def test_date_only_values_are_normalized(self, record_store, write_records):
        write_records([{"id": 1, "startDate": "2024-03-05", "endDate": None}])

        records = await record_store.load()

        assert records[0].start_date == datetime(2024, 3, 5, tzinfo=timezone.utc)
        assert records[0].end_date is None

    @pytest.mark.asyncio
    async def test_unknown_keys_are_preserved(self, record_store, write_records):
        write_records([{"id": 1, "title": "x", "priority": "high"}])

        records = await record_store.load()

        assert records[0].to_document()["priority"] == "high"


class TestStore:
    """Tests for JsonFileStore.store()."""

    @pytest.mark.asyncio
    async def test_writes_pretty_printed_array(self, record_store, data_file):
        await record_store.store([_record(1)])

        text = data_file.read_text(encoding="utf-8")
        assert text.startswith('[\n  {\n    "id": 1,')
        assert json.loads(text) == [
            {
                "id": 1,
                "title": "Record 1",
                "description": "desc",
                "startDate": "2024-01-01T09:30:00.000Z",
                "endDate": "2024-02-01T17:00:00.000Z",
                "status": "open",
            }
        ]

    @pytest.mark.asyncio
    async def test_non_ascii_text_is_written_verbatim(self, record_store, data_file):
        await record_store.store([_record(1, title="Café ☕")])

        assert "Café ☕" in data_file.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_no_temp_file_left_behind(self, record_store, data_file):
        await record_store.store([_record(1)])

        assert [p.name for p in data_file.parent.iterdir()] == ["records.json"]

    @pytest.mark.asyncio
    async def test_round_trip_keeps_every_field(self, record_store):
        originals = [_record(1), _record(2, status="closed"), _record(3, end_date=None)]

        await record_store.store(originals)
        loaded = await record_store.load()

        assert loaded == originals

    @pytest.mark.asyncio
    async def test_store_replaces_previous_contents(self, record_store):
        await record_store.store([_record(1), _record(2)])
        await record_store.store([_record(3)])

        assert [r.id for r in await record_store.load()] == [3]


class TestStorageFailures:
    """Paths that cannot be written must raise, not report success."""

    @pytest.fixture
    def blocked_store(self, tmp_path):
        # A regular file where the parent directory should be
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        return JsonFileStore(blocker / "records.json")

    @pytest.mark.asyncio
    async def test_store_raises_storage_error(self, blocked_store):
        with pytest.raises(StorageError):
            await blocked_store.store([_record(1)])

    @pytest.mark.asyncio
    async def test_load_raises_when_file_cannot_be_created(self, blocked_store):
        with pytest.raises(StorageError, match="initialize"):
            await blocked_store.load()

    @pytest.mark.asyncio
    async def test_health_check_reports_corrupt_file(self, record_store, data_file):
        data_file.write_text("[{]", encoding="utf-8")

        assert await record_store.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_accepts_missing_file(self, record_store):
        assert await record_store.health_check() is True
