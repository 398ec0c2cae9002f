from dataclasses import dataclass, field
from typing import List, Optional

from .dependency_ir import DependencyRecord


@dataclass
class DatabaseInfo:
    database_name: str
    server_id: str
    database_id: Optional[str] = None
    edition: Optional[str] = None
    as_source: List[DependencyRecord] = field(default_factory=list)
    as_destination: List[DependencyRecord] = field(default_factory=list)

    @property
    def has_dependencies(self) -> bool:
        return bool(self.as_source or self.as_destination)

    def matches(self, server: str) -> bool:
        # substring either way: FQDN vs short host name
        a = self.server_id.lower()
        b = server.lower()
        return a in b or b in a

    def to_dict(self) -> dict:
        return {
            "databaseName": self.database_name,
            "serverId": self.server_id,
            "databaseId": self.database_id,
            "edition": self.edition,
            "hasDependencies": self.has_dependencies,
            "dependencies": {
                "asSource": [dep.to_dict() for dep in self.as_source],
                "asDestination": [dep.to_dict() for dep in self.as_destination],
            },
        }
