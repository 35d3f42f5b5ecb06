"""
Protocol interfaces for all repositories.
These define the contracts that repository implementations must follow.
"""
from dataclasses import dataclass
from typing import Protocol, Optional, List, Dict, Any, Iterable, runtime_checkable


# =============================================================================
# Domain Models
# =============================================================================

@dataclass
class DemoEntity:
    """A parsed demo as stored in the demos table."""
    demoid: str
    timestamp: int
    mtime: int
    map: str
    data_version: int
    data: Dict[str, Any]
    notes: Optional[str] = None


@dataclass
class SteamIdEntity:
    """A cached Steam profile."""
    steamid: int
    timestamp: int
    data: Dict[str, Any]


# =============================================================================
# Repository Protocols
# =============================================================================

@runtime_checkable
class MetaRepositoryProtocol(Protocol):
    """Protocol for JSON values stored in the meta table."""

    def get(self, key: str) -> Any:
        """Get a decoded value. Raises MissingMetaKeyError if absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def get_config(self) -> Dict[str, Any]:
        ...

    def set_config(self, config: Dict[str, Any]) -> None:
        ...

    def update_config(self, partial: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge `partial` into the stored config."""
        ...

    def get_schema_version(self) -> int:
        ...

    def set_schema_version(self, version: int) -> None:
        ...


@runtime_checkable
class DemoRepositoryProtocol(Protocol):
    """Protocol for demo record persistence."""

    def get_all(self) -> List[DemoEntity]:
        ...

    def get(self, demoid: str) -> Optional[DemoEntity]:
        ...

    def get_data_version(self, demoid: str) -> Optional[int]:
        ...

    def get_mtime(self, demoid: str) -> Optional[int]:
        ...

    def is_fresh(self, demoid: str, mtime: int) -> bool:
        """True if the stored demo is current for a file with this mtime."""
        ...

    def upsert(self, demoid: str, timestamp: int, mtime: int,
               map_name: str, data: Dict[str, Any]) -> bool:
        ...

    def delete(self, demoid: str) -> bool:
        ...

    def keep_only(self, demoids: Iterable[str]) -> int:
        ...

    def wipe(self) -> int:
        ...

    def get_notes(self, demoid: str) -> Optional[str]:
        ...

    def set_notes(self, demoid: str, notes: Optional[str]) -> None:
        ...


@runtime_checkable
class SteamIdRepositoryProtocol(Protocol):
    """Protocol for the Steam profile cache."""

    def get(self, steamids: Iterable[int]) -> List[SteamIdEntity]:
        ...

    def refresh(self, profiles: Dict[int, Dict[str, Any]]) -> Dict[int, Dict[str, Any]]:
        ...
