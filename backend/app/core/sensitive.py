# app/core/sensitive.py
"""
Sensitive field protection in transit.

The frontend fetches the RSA public key (GET /api/v1/auth/public-key), encrypts
password fields with RSA-OAEP/SHA-256 and sends them base64-encoded. This module
holds the private half and decrypts those fields before they reach the password
hashing code.

The key pair is read from SENSITIVE_DATA_PRIVATE_KEY_FILE (PEM, unencrypted) when
configured; otherwise a new 2048-bit pair is generated at startup, which means
ciphertexts do not survive a restart.
"""
from __future__ import annotations

import base64
import logging
from pathlib import Path

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from app.config import settings
from app.core.errors import InvalidSensitiveData

logger = logging.getLogger(__name__)

_OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


class SensitiveDataService:
    """Encrypt/decrypt short text fields with an RSA key pair."""

    def __init__(self, private_key: rsa.RSAPrivateKey):
        self._private_key = private_key
        self._public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> "SensitiveDataService":
        return cls(rsa.generate_private_key(public_exponent=65537, key_size=2048))

    @classmethod
    def from_pem_file(cls, path: str | Path) -> "SensitiveDataService":
        data = Path(path).read_bytes()
        key = serialization.load_pem_private_key(data, password=None)
        if not isinstance(key, rsa.RSAPrivateKey):
            raise ValueError(f"{path} does not contain an RSA private key")
        return cls(key)

    def public_key_pem(self) -> str:
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")

    def encrypt(self, plaintext: str) -> str:
        """Encrypt with the public key; returns base64 text. Mainly for clients and tests."""
        raw = self._public_key.encrypt(plaintext.encode("utf-8"), _OAEP)
        return base64.b64encode(raw).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt a base64 RSA-OAEP ciphertext.

        Raises:
            InvalidSensitiveData: if the input is not valid base64 or was not
                encrypted with the matching public key
        """
        try:
            raw = base64.b64decode(ciphertext, validate=True)
            return self._private_key.decrypt(raw, _OAEP).decode("utf-8")
        except ValueError as exc:  # also covers binascii.Error and UnicodeDecodeError
            raise InvalidSensitiveData() from exc


def _load_service() -> SensitiveDataService:
    path = settings.sensitive_data_private_key_file
    if path:
        logger.info("Loading sensitive data key from %s", path)
        return SensitiveDataService.from_pem_file(path)
    logger.warning("SENSITIVE_DATA_PRIVATE_KEY_FILE not set, generating an ephemeral RSA key pair")
    return SensitiveDataService.generate()


sensitive_data_service = _load_service()
