"""Exceptions for Crew Match."""


class CrewMatchError(Exception):
    """Base exception for Crew Match errors."""

    pass


class RecordError(CrewMatchError):
    """Raised when a data-store row cannot be turned into a scoring input."""

    def __init__(self, reason: str, record=None):
        self.reason = reason
        self.record = record
        super().__init__(f"Unusable record: {reason}")


class RegionRegistryError(CrewMatchError):
    """Raised when the cruising region registry cannot be loaded."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid region registry {path}: {reason}")
