"""
Connection Profiles - Loads ConnectionInfo objects from a YAML file.

Format:
    connections:
      - id: analytics
        name: Analytics cluster
        db_type: clickhouse
        host: ch.internal
        port: 9000
        username: reader
        database: events
        params: "connect_timeout=5"
      - id: local
        db_type: sqlite
        database: ./local.db

Passwords may be given inline; when absent they are looked up in the system
keyring under the profile id (see PasswordStore). SQLite profiles never
consult the keyring.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..constants import DB_TYPE_SQLITE
from ..database.models import ConnectionInfo
from ..errors import ConfigurationError
from ..utils.password_store import PasswordStore

logger = logging.getLogger(__name__)

_FIELDS = ("id", "name", "db_type", "host", "port", "username", "password", "database", "params")


def _parse_profile(data: Dict[str, Any], passwords: Optional[PasswordStore]) -> ConnectionInfo:
    """Build one ConnectionInfo from a profile mapping."""
    if not data.get("db_type"):
        raise ConfigurationError(f"Connection profile {data.get('id', '?')!r} has no db_type")

    extra = {k: str(v) for k, v in data.items() if k not in _FIELDS}
    info = ConnectionInfo(
        id=str(data.get("id", "")),
        name=str(data.get("name", "")),
        db_type=str(data["db_type"]),
        host=str(data.get("host", "")),
        port=int(data.get("port", 0) or 0),
        username=str(data.get("username", "")),
        password=str(data.get("password", "") or ""),
        database=str(data.get("database", "")),
        params=str(data.get("params", "")),
        extra=extra,
    )

    if passwords is not None and info.db_type != DB_TYPE_SQLITE:
        passwords.fill(info)

    return info


def load_connection_profiles(
    path: Union[str, Path],
    use_keyring: bool = True,
    passwords: Optional[PasswordStore] = None
) -> Dict[str, ConnectionInfo]:
    """
    Load connection profiles from a YAML file.

    Args:
        path: YAML file path
        use_keyring: Fill missing passwords from the system keyring
        passwords: Store to read them from (a default PasswordStore when None)

    Returns:
        Profiles keyed by connection id (empty when the file does not exist)

    Raises:
        ConfigurationError: If the file is not valid YAML or not a profile list
    """
    if use_keyring and passwords is None:
        passwords = PasswordStore()
    elif not use_keyring:
        passwords = None

    yaml_path = Path(path)
    if not yaml_path.exists():
        logger.warning(f"Connection profile file does not exist: {yaml_path}")
        return {}

    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data:
        return {}

    entries = data.get("connections", []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError(f"{yaml_path}: 'connections' must be a list of profiles")

    profiles: Dict[str, ConnectionInfo] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            logger.error(f"Skipping malformed connection profile in {yaml_path}: {entry!r}")
            continue
        try:
            info = _parse_profile(entry, passwords)
        except (ConfigurationError, ValueError) as e:
            logger.error(f"Skipping connection profile in {yaml_path}: {e}")
            continue
        if info.id in profiles:
            logger.warning(f"Duplicate connection id {info.id} in {yaml_path}, keeping the last one")
        profiles[info.id] = info

    logger.info(f"Loaded {len(profiles)} connection profile(s) from {yaml_path}")
    return profiles


def get_connection_profile(
    path: Union[str, Path],
    connection_id: str,
    use_keyring: bool = True,
    passwords: Optional[PasswordStore] = None
) -> Optional[ConnectionInfo]:
    """Load a single profile by id, None when absent."""
    return load_connection_profiles(path, use_keyring, passwords).get(connection_id)
