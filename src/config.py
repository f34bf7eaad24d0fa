"""
Configuration management for the addon backup migration job.
"""

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from clients import DEFAULT_HOST
from errors import ConfigError

REQUIRED_ENV = {
    "api_token": "NF_API_TOKEN",
    "project_id": "NF_PROJECT_ID",
    "source_addon_id": "NF_SOURCE_ADDON_ID",
    "target_addon_id": "NF_TARGET_ADDON_ID",
}


def parse_positive_int(name: str, raw) -> int:
    """
    Parse a wait setting that must be a positive whole number.

    Raises:
        ConfigError: If the value is not a positive integer
    """
    try:
        value = int(str(raw).strip(), 10)
    except (TypeError, ValueError):
        raise ConfigError(f"{raw!r} not valid interval for {name}") from None
    if value <= 0:
        raise ConfigError(f"{raw!r} not valid interval for {name}")
    return value


@dataclass
class MigrationConfig:
    """Configuration for one backup migration run."""

    api_token: str
    project_id: str
    source_addon_id: str
    target_addon_id: str
    host: str = DEFAULT_HOST
    addon_wait_minutes: int = 3
    backup_wait_minutes: int = 15
    poll_interval: int = 30
    report_path: Optional[str] = None
    verbose: bool = False

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "MigrationConfig":
        """
        Create configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            MigrationConfig instance

        Raises:
            ConfigError: If a required value is missing or a wait duration
                is not an integer
        """
        env = os.environ if environ is None else environ
        return cls._build(env, overrides={})

    @classmethod
    def from_args(
        cls, args, environ: Optional[Mapping[str, str]] = None
    ) -> "MigrationConfig":
        """
        Create configuration from command-line arguments, falling back to
        environment variables for anything not given on the command line.

        Args:
            args: Parsed argparse arguments
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            MigrationConfig instance

        Raises:
            ConfigError: If a required value is missing or a wait setting
                is not a positive integer
        """
        env = os.environ if environ is None else environ
        overrides = {
            "host": args.host,
            "api_token": args.api_token,
            "project_id": args.project,
            "source_addon_id": args.source_addon,
            "target_addon_id": args.target_addon,
            "addon_wait_minutes": args.addon_wait,
            "backup_wait_minutes": args.backup_wait,
        }
        config = cls._build(
            env, overrides={k: v for k, v in overrides.items() if v is not None}
        )
        config.poll_interval = parse_positive_int("--poll-interval", args.poll_interval)
        config.report_path = args.report
        config.verbose = args.verbose
        return config

    @classmethod
    def _build(cls, env: Mapping[str, str], overrides: Dict) -> "MigrationConfig":
        values = {}
        for field_name, env_name in REQUIRED_ENV.items():
            value = overrides.get(field_name) or env.get(env_name, "")
            if not value:
                raise ConfigError(f"{env_name} is required")
            values[field_name] = value

        values["host"] = overrides.get("host") or env.get("NF_HOST") or DEFAULT_HOST
        values["addon_wait_minutes"] = parse_positive_int(
            "ADDON_WAIT_DURATION",
            overrides.get("addon_wait_minutes")
            or env.get("ADDON_WAIT_DURATION")
            or "3",
        )
        values["backup_wait_minutes"] = parse_positive_int(
            "BACKUP_WAIT_DURATION",
            overrides.get("backup_wait_minutes")
            or env.get("BACKUP_WAIT_DURATION")
            or "15",
        )
        return cls(**values)

    def describe(self) -> Dict:
        """Return the configuration for logging, with the API token masked."""
        token = self.api_token or ""
        masked = f"{token[:4]}****" if len(token) > 8 else "****"
        return {
            "host": self.host,
            "api_token": masked,
            "project_id": self.project_id,
            "source_addon_id": self.source_addon_id,
            "target_addon_id": self.target_addon_id,
            "addon_wait_minutes": self.addon_wait_minutes,
            "backup_wait_minutes": self.backup_wait_minutes,
            "poll_interval": self.poll_interval,
        }
