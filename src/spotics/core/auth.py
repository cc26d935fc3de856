"""
Supplies the long-lived credentials used to refresh provider tokens.

Sources, first non-empty value wins per field:

- The credentials JSON file (`token_path` setting)
- Environment variables (`SPOTICS_CLIENT_ID`, `SPOTICS_CLIENT_SECRET`, `SPOTICS_SP_DC`)
- The system keyring under the service name "spotics", unless
  `SPOTICS_DISABLE_KEYRING=1`

Missing fields are not an error here. A provider raises `CredentialsMissing`
only when it actually has to refresh its token.
"""

import logging
import os
from typing import Optional

import keyring
import keyring.errors

from .config import SpoticsSettings
from .token_store import TokenStore
from .tokens import Credentials

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "spotics"
CREDENTIAL_KEYS = ("client_id", "client_secret", "sp_dc")
CREDENTIALS_FILE_MODE = 0o600

_ENV_OVERRIDES = {
    "client_id": "SPOTICS_CLIENT_ID",
    "client_secret": "SPOTICS_CLIENT_SECRET",
    "sp_dc": "SPOTICS_SP_DC",
}


def _keyring_enabled() -> bool:
    return os.getenv("SPOTICS_DISABLE_KEYRING") != "1"


def _keyring_get(key: str) -> Optional[str]:
    if not _keyring_enabled():
        return None
    try:
        return keyring.get_password(KEYRING_SERVICE, key)
    except keyring.errors.KeyringError as e:
        logger.debug("Keyring unavailable for %s: %s", key, e)
        return None


def credentials_store(settings: SpoticsSettings) -> TokenStore[Credentials]:
    return TokenStore(settings.token_path, Credentials, mode=CREDENTIALS_FILE_MODE)


async def load_credentials(settings: SpoticsSettings) -> Credentials:
    """Merge credentials from file, environment and keyring.

    Raises `InvalidFormat` when the credentials file exists but is malformed.
    """
    from_file = await credentials_store(settings).load()
    values = from_file.model_dump() if from_file else {}
    for key in CREDENTIAL_KEYS:
        if values.get(key):
            continue
        values[key] = os.getenv(_ENV_OVERRIDES[key]) or _keyring_get(key)
    creds = Credentials(**values)
    if creds.missing():
        logger.debug("Credentials not configured: %s", ", ".join(creds.missing()))
    return creds


def store_credentials(key: str, value: str) -> None:
    """Store one credential in the system keyring.

    Raises `keyring.errors.KeyringError` if the backend refuses the write.
    """
    if key not in CREDENTIAL_KEYS:
        raise ValueError(f"Unknown credential key: {key}")
    keyring.set_password(KEYRING_SERVICE, key, value)


def clear_credentials() -> None:
    """Remove all spotics credentials from the keyring, ignoring missing ones."""
    for key in CREDENTIAL_KEYS:
        try:
            if keyring.get_password(KEYRING_SERVICE, key) is None:
                continue
            keyring.delete_password(KEYRING_SERVICE, key)
        except keyring.errors.PasswordDeleteError:
            logger.debug("Credential %s already absent from keyring", key)
