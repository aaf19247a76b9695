"""
Unit tests for the transferring file cleanup loop.
"""
import asyncio
import datetime as dt
from unittest.mock import AsyncMock, patch

import pytest

from app.services.transfer_files import run_cleanup_loop


@pytest.mark.asyncio
@patch("app.services.transfer_files.asyncio.sleep", new_callable=AsyncMock)
@patch("app.services.transfer_files.purge_older_than", new_callable=AsyncMock)
async def test_loop_purges_with_retention_cutoff(mock_purge, mock_sleep):
    mock_sleep.side_effect = asyncio.CancelledError()
    before = dt.datetime.now(dt.timezone.utc)

    with pytest.raises(asyncio.CancelledError):
        await run_cleanup_loop(60, dt.timedelta(hours=2))

    cutoff = mock_purge.call_args.args[0]
    assert before - dt.timedelta(hours=2) <= cutoff <= dt.datetime.now(dt.timezone.utc) - dt.timedelta(hours=2)
    mock_sleep.assert_awaited_once_with(60)


@pytest.mark.asyncio
@patch("app.services.transfer_files.asyncio.sleep", new_callable=AsyncMock)
@patch("app.services.transfer_files.purge_older_than", new_callable=AsyncMock)
async def test_loop_survives_failed_pass(mock_purge, mock_sleep):
    mock_purge.side_effect = [RuntimeError("db down"), 0]
    mock_sleep.side_effect = [None, asyncio.CancelledError()]

    with pytest.raises(asyncio.CancelledError):
        await run_cleanup_loop(5, dt.timedelta(minutes=1))

    assert mock_purge.await_count == 2
