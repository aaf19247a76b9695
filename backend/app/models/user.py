# app/models/user.py
"""
Database model for users.
A user is the identity behind both local (username/password) and external
(OAuth2) credentials; credentials live in their own tables and point here.
"""
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has at most one LoginData (one-to-one, via related_name="login_data")
    - Has many ExternalLoginData (one-to-many, via related_name="external_logins")
    """
    id = fields.BigIntField(pk=True)  # Primary key: auto-increment numeric id
    name = fields.CharField(max_length=256)  # Display name
    admin = fields.BooleanField(default=False)  # Administrator flag
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
