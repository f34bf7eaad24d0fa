"""
Northflank Addon Backup Migration.
"""

from clients import NorthflankRestClient
from config import MigrationConfig
from errors import (
    ConfigError,
    MigrationError,
    MissingArtifactError,
    NotFoundError,
    TerminalFailureError,
    WaitTimeoutError,
)
from log_utils import setup_logging
from migration import BackupMigration, select_latest_backup
from models import AddonSnapshot, BackupSnapshot, MigrationResult, WaitBudget, WaitState
from waiters import wait_until_concluded, wait_until_ready

__all__ = [
    "NorthflankRestClient",
    "MigrationConfig",
    "ConfigError",
    "MigrationError",
    "MissingArtifactError",
    "NotFoundError",
    "TerminalFailureError",
    "WaitTimeoutError",
    "setup_logging",
    "BackupMigration",
    "select_latest_backup",
    "AddonSnapshot",
    "BackupSnapshot",
    "MigrationResult",
    "WaitBudget",
    "WaitState",
    "wait_until_concluded",
    "wait_until_ready",
]
