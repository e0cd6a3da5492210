"""Admin domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConnectionResult:
    """Outcome of a database connectivity check."""

    success: bool
    error: str | None = None


@dataclass(frozen=True)
class SchemaResult:
    """Outcome of a schema creation request."""

    success: bool
    message: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a backup import into SQL."""

    success: bool
    message: str | None = None
    error: str | None = None
