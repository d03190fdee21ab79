"""Credential encryption for provider configuration rows.

Credentials maps are serialized to JSON and sealed with Fernet from the
``cryptography`` package before they reach the database.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class SecretManager:
    """Seal and open credential maps.

    Parameters
    ----------
    passphrase:
        Secret used to derive a stable Fernet key (SHA-256 digest).
        When empty a throwaway key is generated, so sealed values do not
        survive a restart.
    """

    def __init__(self, passphrase: str = "") -> None:
        if passphrase:
            digest = hashlib.sha256(passphrase.encode()).digest()
            self._fernet = Fernet(base64.urlsafe_b64encode(digest))
        else:
            logger.warning(
                "STOREFRONT_SECRET_KEY is not set; provider credentials "
                "will be unreadable after a restart."
            )
            self._fernet = Fernet(Fernet.generate_key())

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str | None:
        """Return the plaintext, or ``None`` when the token cannot be opened."""
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, ValueError):
            logger.warning(
                "Could not decrypt stored credentials (length=%d)",
                len(ciphertext),
            )
            return None

    # ------------------------------------------------------------------
    # JSON maps
    # ------------------------------------------------------------------

    def seal(self, credentials: dict[str, Any]) -> str:
        """Encrypt a credentials map; an empty map is stored as ``""``."""
        if not credentials:
            return ""
        return self.encrypt(json.dumps(credentials, sort_keys=True))

    def open(self, sealed: str | None) -> dict[str, Any]:
        """Decrypt a sealed credentials map; unreadable values become ``{}``."""
        if not sealed:
            return {}
        plaintext = self.decrypt(sealed)
        if plaintext is None:
            return {}
        data = json.loads(plaintext)
        return data if isinstance(data, dict) else {}
