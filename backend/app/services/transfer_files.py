# backend/app/services/transfer_files.py
"""
Transferring File lookup and cleanup

Upload records that stopped progressing are found by last_modified_time and
swept periodically by the loop started in main.py.
"""
import asyncio
import datetime as dt
import logging
from typing import List

from app.models.transferring_file import TransferringFile

logger = logging.getLogger(__name__)


async def find_all_older_than(cutoff: dt.datetime) -> List[TransferringFile]:
    """All records whose last_modified_time is strictly before cutoff (unordered)"""
    return await TransferringFile.filter(last_modified_time__lt=cutoff)


async def purge_older_than(cutoff: dt.datetime) -> int:
    """Delete records older than cutoff; returns the number of rows removed"""
    deleted = await TransferringFile.filter(last_modified_time__lt=cutoff).delete()
    if deleted:
        logger.info("[Cleanup] Removed %d stale transferring file record(s) older than %s", deleted, cutoff.isoformat())
    return deleted


async def run_cleanup_loop(interval_seconds: int, retention: dt.timedelta) -> None:
    """
    Purge stale records every interval_seconds until cancelled.
    A failed pass is logged and retried on the next tick.
    """
    while True:
        cutoff = dt.datetime.now(dt.timezone.utc) - retention
        try:
            await purge_older_than(cutoff)
        except Exception:
            logger.exception("[Cleanup] Transferring file sweep failed")
        await asyncio.sleep(interval_seconds)
