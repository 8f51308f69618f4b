"""
ConnectionInfo model - Where and how to reach one database engine
"""
from dataclasses import dataclass, field
from typing import Dict
import uuid


@dataclass
class ConnectionInfo:
    """Connection parameters for a single engine endpoint"""
    id: str = ""
    name: str = ""
    db_type: str = ""
    host: str = ""
    port: int = 0
    username: str = ""
    password: str = field(default="", repr=False)
    database: str = ""
    params: str = ""
    extra: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())
        if not self.name:
            self.name = self.id
        self.db_type = self.db_type.lower()

    def get_database(self, default: str = "") -> str:
        """Return the configured database, or ``default`` when none is set."""
        return self.database or default
