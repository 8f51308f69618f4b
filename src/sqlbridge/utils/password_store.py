"""
Password Store - Connection passwords kept in the system keyring

Profiles and ConnectionInfo objects may leave ``password`` empty; the engine
fills it from the keyring right before the driver connects. One keyring
service per engine (``sqlbridge/clickhouse``) holds one entry per connection
id, so the username stays in the profile and only the secret lives in the OS
credential store.
"""

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..database.models import ConnectionInfo
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

SERVICE_PREFIX = "sqlbridge"


class PasswordStore:
    """
    Keyring-backed passwords for ConnectionInfo objects.

    Reads degrade: a missing keyring backend is logged and treated as "no
    stored password", since many engines accept password-less users.
    Writes propagate as ConfigurationError.
    """

    def __init__(self, service_prefix: str = SERVICE_PREFIX):
        self.service_prefix = service_prefix

    def service(self, db_type: str) -> str:
        return f"{self.service_prefix}/{db_type.lower()}"

    def lookup(self, info: ConnectionInfo) -> Optional[str]:
        """Stored password for ``info``, None when absent or unreadable."""
        try:
            return keyring.get_password(self.service(info.db_type), info.id)
        except KeyringError as e:
            logger.warning(f"Keyring unavailable, no stored password for {info.name}: {e}")
            return None

    def fill(self, info: ConnectionInfo) -> ConnectionInfo:
        """
        Set ``info.password`` from the keyring when it is empty.

        Returns:
            The same ConnectionInfo, for chaining
        """
        if info.password:
            return info
        password = self.lookup(info)
        if password:
            info.password = password
            logger.debug(f"Password for connection {info.name} loaded from keyring")
        return info

    def save(self, info: ConnectionInfo):
        """
        Store ``info.password`` under the connection id.

        Raises:
            ConfigurationError: If there is no password or the keyring rejects it
        """
        if not info.password:
            raise ConfigurationError(f"Connection {info.name} has no password to store")
        try:
            keyring.set_password(self.service(info.db_type), info.id, info.password)
        except KeyringError as e:
            raise ConfigurationError(f"Cannot store password for {info.name}: {e}") from e
        logger.info(f"Password for connection {info.name} stored in keyring")

    def forget(self, info: ConnectionInfo) -> bool:
        """
        Remove the stored password.

        Returns:
            False when nothing was stored
        """
        try:
            keyring.delete_password(self.service(info.db_type), info.id)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise ConfigurationError(f"Cannot remove password for {info.name}: {e}") from e
        logger.info(f"Password for connection {info.name} removed from keyring")
        return True
