"""
Core data models for the schemacrud package.

Defines the dialect and timestamp enums, the per-table metadata record held by
the MetadataStore, and the YAML-backed facade configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Table selector meaning "every table that has this column"
WILDCARD_TABLE = "*"


class Dialect(str, Enum):
    """Database engine families with an introspection routine."""
    MYSQL = "mysql"     # client/server
    SQLITE = "sqlite"   # embedded, file-based


class TimestampKind(str, Enum):
    """Which write a managed timestamp column is stamped on."""
    ON_INSERT = "on_insert"
    ON_UPDATE = "on_update"


@dataclass
class TableMetadata:
    """Metadata for a single table as discovered by introspection."""
    name: str
    columns: List[str] = field(default_factory=list)  # ordinary columns, discovery order
    primary_key: Optional[str] = None
    on_insert: Optional[str] = None
    on_update: Optional[str] = None

    def timestamp_column(self, kind: TimestampKind) -> Optional[str]:
        """Return the managed timestamp column of the given kind."""
        if kind is TimestampKind.ON_INSERT:
            return self.on_insert
        return self.on_update

    def set_timestamp_column(self, kind: TimestampKind, column: Optional[str]) -> None:
        if kind is TimestampKind.ON_INSERT:
            self.on_insert = column
        else:
            self.on_update = column

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "columns": list(self.columns),
            "primary_key": self.primary_key,
            "on_insert": self.on_insert,
            "on_update": self.on_update,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TableMetadata:
        """Create from dictionary."""
        return cls(
            name=data["name"],
            columns=list(data.get("columns", [])),
            primary_key=data.get("primary_key"),
            on_insert=data.get("on_insert"),
            on_update=data.get("on_update"),
        )


@dataclass
class FacadeConfig:
    """Configuration applied to a DataAccessFacade after introspection."""
    dialect: Optional[str] = None  # None means detect from the connection
    manage_timestamps: bool = False

    # table (or "*") -> column; None clears the slot
    on_insert: Dict[str, Optional[str]] = field(default_factory=dict)
    on_update: Dict[str, Optional[str]] = field(default_factory=dict)

    def designations(self, kind: TimestampKind) -> Dict[str, Optional[str]]:
        """Return the timestamp designations of the given kind, in file order."""
        if kind is TimestampKind.ON_INSERT:
            return self.on_insert
        return self.on_update

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "dialect": self.dialect,
            "manage_timestamps": self.manage_timestamps,
            "timestamps": {
                "on_insert": dict(self.on_insert),
                "on_update": dict(self.on_update),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FacadeConfig:
        """Create from dictionary."""
        timestamps = data.get("timestamps") or {}
        return cls(
            dialect=data.get("dialect"),
            manage_timestamps=bool(data.get("manage_timestamps", False)),
            on_insert=dict(timestamps.get("on_insert") or {}),
            on_update=dict(timestamps.get("on_update") or {}),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> FacadeConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return cls()

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)
        logger.info(
            f"Loaded config from {path} "
            f"({len(config.on_insert)} on-insert, {len(config.on_update)} on-update designations)"
        )
        return config

