"""Exceptions raised by the HeadshotBox persistence layer."""


class HeadshotBoxDBError(Exception):
    """Base exception for database errors"""
    pass


class SchemaInitError(HeadshotBoxDBError):
    """Raised when the initial schema cannot be created"""
    pass


class MigrationPathError(HeadshotBoxDBError):
    """Raised when no chain of migrations leads to the target schema version"""

    def __init__(self, current: int, target: int, missing: int):
        self.current = current
        self.target = target
        self.missing = missing
        super().__init__(
            f"Cannot find a migration plan from schema version {current} "
            f"to {target} (no step from version {missing})"
        )


class MigrationError(HeadshotBoxDBError):
    """Raised when a migration step fails and is rolled back"""

    def __init__(self, from_version: int, to_version: int, message: str):
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(
            f"Migration from schema version {from_version} to {to_version} failed: {message}"
        )


class MissingMetaKeyError(HeadshotBoxDBError, KeyError):
    """Raised when a meta key is requested that was never written"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self):
        return f"No meta value stored for key '{self.key}'"
