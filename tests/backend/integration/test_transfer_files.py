import datetime as dt

import pytest

from app.models.transferring_file import FileTransferState, TransferringFile
from app.services.transfer_files import find_all_older_than, purge_older_than


pytestmark = pytest.mark.asyncio

NOW = dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.timezone.utc)


async def _file(name: str, last_modified: dt.datetime) -> TransferringFile:
    f = await TransferringFile.create(unique_name=name, file_type="HEAP_DUMP", total_size=100)
    # auto_now overrides values passed to create(); a queryset update does not
    await TransferringFile.filter(id=f.id).update(last_modified_time=last_modified)
    return await TransferringFile.get(id=f.id)


async def test_find_all_older_than_is_strict(db):
    old = await _file("old", NOW - dt.timedelta(hours=3))
    older = await _file("older", NOW - dt.timedelta(days=2))
    await _file("at-cutoff", NOW)
    await _file("newer", NOW + dt.timedelta(seconds=1))

    found = await find_all_older_than(NOW)

    assert {f.id for f in found} == {old.id, older.id}
    assert all(f.last_modified_time < NOW for f in found)


async def test_find_all_older_than_empty(db):
    await _file("fresh", NOW)
    assert await find_all_older_than(NOW - dt.timedelta(minutes=1)) == []


async def test_new_record_defaults(db):
    f = await TransferringFile.create(unique_name="x", file_type="THREAD_DUMP")
    assert f.state == FileTransferState.IN_PROGRESS
    assert f.transferred_size == 0
    assert f.last_modified_time is not None


async def test_purge_older_than_only_removes_stale(db):
    await _file("stale-1", NOW - dt.timedelta(hours=30))
    await _file("stale-2", NOW - dt.timedelta(hours=25))
    keep = await _file("recent", NOW - dt.timedelta(hours=1))

    deleted = await purge_older_than(NOW - dt.timedelta(hours=24))

    assert deleted == 2
    remaining = await TransferringFile.all()
    assert [f.id for f in remaining] == [keep.id]


async def test_purge_with_nothing_stale(db):
    await _file("recent", NOW)
    assert await purge_older_than(NOW - dt.timedelta(hours=24)) == 0
    assert await TransferringFile.all().count() == 1


async def test_save_refreshes_last_modified_time(db):
    f = await _file("uploading", NOW - dt.timedelta(hours=30))

    f.transferred_size = 50
    await f.save()

    reloaded = await TransferringFile.get(id=f.id)
    assert reloaded.transferred_size == 50
    assert reloaded.last_modified_time > NOW


async def test_progressing_upload_survives_purge(db):
    f = await _file("uploading", NOW - dt.timedelta(hours=30))
    f.transferred_size = 80
    await f.save()

    assert await purge_older_than(NOW - dt.timedelta(hours=24)) == 0
    assert await TransferringFile.filter(id=f.id).exists()
