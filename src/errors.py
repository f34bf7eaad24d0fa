"""
Exception types raised by the addon backup migration job.
"""

from typing import Optional


class MigrationError(RuntimeError):
    """Base class for every error that aborts a migration run."""


class ConfigError(MigrationError):
    """Configuration is missing or invalid."""


class NotFoundError(MigrationError):
    """A project, addon or backup is absent or came back malformed."""


class WaitTimeoutError(MigrationError, TimeoutError):
    """A polling loop exceeded its wait budget."""

    def __init__(
        self,
        message: str,
        resource_id: str,
        last_status: Optional[str],
        elapsed_seconds: float,
    ):
        super().__init__(message)
        self.resource_id = resource_id
        self.last_status = last_status
        self.elapsed_seconds = elapsed_seconds


class TerminalFailureError(MigrationError):
    """A backup or import job reached a terminated-failure status."""

    def __init__(self, message: str, backup_id: str, status: str):
        super().__init__(message)
        self.backup_id = backup_id
        self.status = status


class MissingArtifactError(MigrationError):
    """A successful response lacked a field the next step depends on."""
