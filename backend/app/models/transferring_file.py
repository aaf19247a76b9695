# app/models/transferring_file.py
"""
Database model for in-flight uploads.
Rows are created by the upload pipeline; last_modified_time is refreshed on every
save as data arrives, and the cleanup sweep removes rows whose last_modified_time falls
behind the retention window.
"""
from enum import Enum

from tortoise import fields, models

class FileTransferState(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

class TransferringFile(models.Model):
    id = fields.BigIntField(pk=True)
    unique_name = fields.CharField(max_length=256, unique=True)  # Name of the file in storage
    file_type = fields.CharField(max_length=32)  # e.g. HEAP_DUMP, THREAD_DUMP
    state = fields.CharEnumField(FileTransferState, max_length=16, default=FileTransferState.IN_PROGRESS)
    total_size = fields.BigIntField(default=0)
    transferred_size = fields.BigIntField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    last_modified_time = fields.DatetimeField(auto_now=True, index=True)  # Refreshed on every save()

    class Meta:
        table = "transferring_files"
