# app/models/external_login_data.py
"""
External credential: links a principal at a third-party identity provider to a local User.
"""
from enum import Enum

from tortoise import fields, models

class ExternalLoginMethod(str, Enum):
    OAUTH2 = "OAUTH2"

class ExternalLoginData(models.Model):
    """
    One row per (method, provider, principal_name). A user may have any number of them.
    """
    id = fields.BigIntField(pk=True)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="external_logins",
        on_delete=fields.CASCADE,
    )
    method = fields.CharEnumField(ExternalLoginMethod, max_length=16)
    provider = fields.CharField(max_length=64)  # OAuth2 client registration id, e.g. "github"
    principal_name = fields.CharField(max_length=256)  # Subject at the provider
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "external_login_data"
        unique_together = (("method", "provider", "principal_name"),)
