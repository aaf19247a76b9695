# app/models/login_data.py
"""
Local credential: username + password hash for direct login.
"""
from tortoise import fields, models

class LoginData(models.Model):
    id = fields.BigIntField(pk=True)
    user = fields.OneToOneField(
        "models.User",
        related_name="login_data",
        on_delete=fields.CASCADE,
    )
    # Unique at the storage level; the service-side check only gives a nicer error
    username = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)  # argon2 hash, never plain text

    class Meta:
        table = "login_data"
