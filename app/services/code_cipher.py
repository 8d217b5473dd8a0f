# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: One-time code cipher for pocket sign-in codes.
Codes are stored Fernet-encrypted and decrypted only when shown to a member.
"""

import secrets
import string

from cryptography.fernet import Fernet

from app.core.logging import get_logger

logger = get_logger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 10


class CodeCipher:
    """Reversible transform for stored one-time codes."""

    def __init__(self, key: str | bytes | None = None) -> None:
        if not key:
            logger.warning(
                "ENCRYPTION_KEY not set; using an ephemeral key, stored codes "
                "will not survive a restart"
            )
            key = Fernet.generate_key()
        self._fernet = Fernet(key)

    def encrypt(self, plain: str) -> str:
        return self._fernet.encrypt(plain.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str) -> str:
        return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")

    @staticmethod
    def generate_code(prefix: str = "") -> str:
        body = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        return f"{prefix}{body}"
