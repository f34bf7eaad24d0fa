"""
Backup migration workflow between two Northflank addons.

The run waits for the source and target addons to be running, picks the
newest completed same-addon backup of the source, imports it into the
target, waits for the import to complete and requests a restore. Any
failure aborts the run; nothing is retried or cleaned up.
"""

import json
import logging
import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from clients import NorthflankRestClient
from config import MigrationConfig
from errors import MissingArtifactError, NotFoundError
from models import BackupSnapshot, MigrationResult
from waiters import wait_until_concluded, wait_until_ready

logger = logging.getLogger(__name__)

ELIGIBLE_BACKUP_STATUS = "completed"
SAME_ADDON_SOURCE_TYPE = "sameAddon"
IMPORT_NAME_PREFIX = "cron-job-import"


def select_latest_backup(
    backups: Iterable[BackupSnapshot],
) -> Optional[BackupSnapshot]:
    """
    Return the first completed same-addon backup in the given order.

    The API lists backups newest first; the order is trusted as-is.
    """
    for backup in backups:
        if (
            backup.status == ELIGIBLE_BACKUP_STATUS
            and backup.source_type == SAME_ADDON_SOURCE_TYPE
        ):
            return backup
    return None


def import_name_for(run_timestamp_ms: int) -> str:
    """Name for the import created by a run started at the given time."""
    return f"{IMPORT_NAME_PREFIX}-{run_timestamp_ms}"


def format_duration(seconds: float) -> str:
    """Render a duration as e.g. "42.0s", "3m 30s" or "1h 2m 5s"."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(round(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


class BackupMigration:
    """Copies the latest backup of a source addon onto a target addon."""

    def __init__(
        self,
        config: MigrationConfig,
        api: Optional[NorthflankRestClient] = None,
        run_timestamp_ms: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the migration.

        Args:
            config: Migration configuration
            api: Client to use (built from config when omitted)
            run_timestamp_ms: Process start time in milliseconds, used to name
                the import (the CLI passes it; defaults to the start of each run)
            sleep: Sleep function used by the polling loops
            clock: Time source in seconds
        """
        self.config = config
        self.api = api or NorthflankRestClient(
            api_token=config.api_token, host=config.host
        )
        self.run_timestamp_ms = run_timestamp_ms
        self.sleep = sleep
        self.clock = clock

        self.stats = {
            "backups_listed": 0,
            "eligible_backups": 0,
            "imports_started": 0,
            "imports_completed": 0,
            "restores_requested": 0,
        }

        self.run_start_time: Optional[float] = None
        self.run_end_time: Optional[float] = None
        self.result: Optional[MigrationResult] = None

    def run(self) -> MigrationResult:
        """
        Execute the migration.

        Returns:
            MigrationResult with status "restore_requested" or "no_backup"

        Raises:
            MigrationError: On any failed step; the run stops at that step
            RuntimeError: If a remote call fails
        """
        cfg = self.config
        self.run_start_time = self.clock()
        self.stats = dict.fromkeys(self.stats, 0)

        logger.info("=" * 70)
        logger.info("Northflank Addon Backup Migration")
        logger.info("=" * 70)
        for key, value in cfg.describe().items():
            logger.info(f"{key:20s}: {value}")
        logger.info(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info("=" * 70)

        project = self.api.get_project(cfg.project_id)
        if not project:
            raise NotFoundError(f"Project not found: {cfg.project_id}")

        for addon_id in (cfg.source_addon_id, cfg.target_addon_id):
            wait_until_ready(
                self.api,
                cfg.project_id,
                addon_id,
                max_wait_minutes=cfg.addon_wait_minutes,
                poll_interval=cfg.poll_interval,
                sleep=self.sleep,
                clock=self.clock,
            )

        backups = self._list_source_backups()
        latest = select_latest_backup(backups)
        if latest is None:
            logger.info(
                f"No completed {SAME_ADDON_SOURCE_TYPE} backup found for "
                f"{cfg.source_addon_id}; nothing to import"
            )
            return self._finish(MigrationResult(status="no_backup"))

        logger.info(f"Latest eligible backup: {latest.id}")
        run_timestamp_ms = self.run_timestamp_ms
        if run_timestamp_ms is None:
            run_timestamp_ms = int(self.run_start_time * 1000)
        import_name = import_name_for(run_timestamp_ms)
        imported = self._start_import(latest, import_name)

        concluded = wait_until_concluded(
            self.api,
            cfg.project_id,
            cfg.target_addon_id,
            imported.id,
            max_wait_minutes=cfg.backup_wait_minutes,
            poll_interval=cfg.poll_interval,
            sleep=self.sleep,
            clock=self.clock,
        )
        self.stats["imports_completed"] += 1

        # Restore outcome is not awaited; the run succeeds once it is requested.
        self.api.restore_addon_backup(
            cfg.project_id, cfg.target_addon_id, concluded.id
        )
        self.stats["restores_requested"] += 1
        logger.info(f"Initiated restore of {concluded.id} on {cfg.target_addon_id}")

        return self._finish(
            MigrationResult(
                status="restore_requested",
                source_backup_id=latest.id,
                import_backup_id=concluded.id,
                import_name=import_name,
            )
        )

    def _list_source_backups(self) -> List[BackupSnapshot]:
        """Fetch source backups in API order, dropping entries without an id."""
        cfg = self.config
        raw = self.api.list_addon_backups(cfg.project_id, cfg.source_addon_id)
        backups = [b for b in map(BackupSnapshot.from_api, raw) if b is not None]
        self.stats["backups_listed"] = len(backups)
        self.stats["eligible_backups"] = sum(
            1
            for b in backups
            if b.status == ELIGIBLE_BACKUP_STATUS
            and b.source_type == SAME_ADDON_SOURCE_TYPE
        )
        logger.info(
            f"Found {len(backups)} backup(s) for {cfg.source_addon_id}, "
            f"{self.stats['eligible_backups']} eligible"
        )
        return backups

    def _start_import(self, source: BackupSnapshot, import_name: str) -> BackupSnapshot:
        """
        Import a source backup into the target addon via its download link.

        Raises:
            MissingArtifactError: If the link or the new import id is missing
        """
        cfg = self.config
        link = self.api.get_addon_download_link(
            cfg.project_id, cfg.source_addon_id, source.id
        )
        if not link or not link.get("downloadLink"):
            raise MissingArtifactError(
                f"Download link could not be fetched for backup {source.id}."
            )

        created = self.api.import_addon_backup(
            cfg.project_id,
            cfg.target_addon_id,
            source.id,
            name=import_name,
            import_url=link["downloadLink"],
        )
        imported = BackupSnapshot.from_api(created)
        if imported is None:
            raise MissingArtifactError(
                f"Backup could not be initiated from download link of {source.id}."
            )
        self.stats["imports_started"] += 1
        logger.info(f"Import {imported.id} ({import_name}) started on {cfg.target_addon_id}")
        return imported

    def _finish(self, result: MigrationResult) -> MigrationResult:
        self.run_end_time = self.clock()
        result.start_time = self.run_start_time
        result.end_time = self.run_end_time
        result.duration_seconds = self.run_end_time - self.run_start_time
        self.result = result
        self._print_report()
        if self.config.report_path:
            self._export_results_json(self.config.report_path)
        return result

    def _print_report(self):
        """Log a summary of the run."""
        r = self.result
        logger.info("")
        logger.info("=" * 70)
        logger.info("MIGRATION REPORT")
        logger.info("=" * 70)
        logger.info(f"Outcome:         {r.status}")
        logger.info(f"Source backup:   {r.source_backup_id or 'N/A'}")
        logger.info(f"Import:          {r.import_backup_id or 'N/A'}")
        logger.info(f"Total duration:  {format_duration(r.duration_seconds)}")
        logger.info("-" * 40)
        for k, v in self.stats.items():
            logger.info(f"{k:20s}: {v}")
        logger.info("=" * 70)

    def _report(self) -> Dict:
        r = self.result
        return {
            "project_id": self.config.project_id,
            "source_addon_id": self.config.source_addon_id,
            "target_addon_id": self.config.target_addon_id,
            "status": r.status,
            "source_backup_id": r.source_backup_id,
            "import_backup_id": r.import_backup_id,
            "import_name": r.import_name,
            "start_time": datetime.fromtimestamp(r.start_time).isoformat(),
            "end_time": datetime.fromtimestamp(r.end_time).isoformat(),
            "total_duration_seconds": r.duration_seconds,
            "statistics": self.stats,
        }

    def _export_results_json(self, filename: str):
        """Export the run outcome to a JSON file."""
        with open(filename, "w") as f:
            json.dump(self._report(), f, indent=2)
        logger.info(f"Report exported to: {filename}")
