"""
Polling loops that wait for addons and backup jobs to settle.

Classification of an observed status is kept separate from the loop that
owns timing, so each can be exercised on its own:

- classify_addon_status / classify_backup_status map a raw status string
  to a WaitState.
- poll_until_settled fetches, classifies, checks the wait budget and
  sleeps a fixed interval between fetches.
- wait_until_ready / wait_until_concluded bind the two to the Northflank
  client and turn non-success outcomes into exceptions.
"""

import logging
import time
from typing import Callable, Optional, Tuple, TypeVar

from errors import NotFoundError, TerminalFailureError, WaitTimeoutError
from models import AddonSnapshot, BackupSnapshot, WaitBudget, WaitState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 30

ADDON_READY_STATUS = "running"
BACKUP_COMPLETED_STATUSES = frozenset({"completed"})
BACKUP_TERMINATED_STATUSES = frozenset(
    {"aborting", "aborted", "failed", "not-supported"}
)

TERMINAL_STATES = {WaitState.READY, WaitState.COMPLETED, WaitState.FAILED}

Snapshot = TypeVar("Snapshot", AddonSnapshot, BackupSnapshot)


def classify_addon_status(status: Optional[str]) -> WaitState:
    """Map an addon status to READY or PENDING."""
    if status == ADDON_READY_STATUS:
        return WaitState.READY
    return WaitState.PENDING


def classify_backup_status(status: Optional[str]) -> WaitState:
    """Map a backup status to COMPLETED, FAILED or PENDING."""
    if status in BACKUP_COMPLETED_STATUSES:
        return WaitState.COMPLETED
    if status in BACKUP_TERMINATED_STATUSES:
        return WaitState.FAILED
    return WaitState.PENDING


def poll_until_settled(
    fetch: Callable[[], Snapshot],
    classify: Callable[[str], WaitState],
    budget: WaitBudget,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    sleep_first: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> Tuple[WaitState, Snapshot]:
    """
    Poll until a terminal state is observed or the budget runs out.

    Args:
        fetch: Returns a fresh snapshot; raises if the resource is gone
        classify: Maps the snapshot status to a WaitState
        budget: Wall-clock allowance for the whole loop
        poll_interval: Fixed delay between fetches (seconds)
        sleep_first: Sleep before every fetch, including the first
        sleep: Sleep function (injectable for tests)
        clock: Time source in seconds (injectable for tests)

    Returns:
        Tuple of (final state, last snapshot). The state is TIMED_OUT when
        the budget was exceeded before a terminal state was seen.
    """
    attempt = 0
    while True:
        if sleep_first:
            sleep(poll_interval)

        snapshot = fetch()
        attempt += 1
        state = classify(snapshot.status)
        logger.debug(
            f"Poll #{attempt} for {snapshot.id}: status={snapshot.status} -> {state.value}"
        )

        if state in TERMINAL_STATES:
            return state, snapshot

        if budget.exceeded(clock()):
            return WaitState.TIMED_OUT, snapshot

        if not sleep_first:
            sleep(poll_interval)


def wait_until_ready(
    client,
    project_id: str,
    addon_id: str,
    max_wait_minutes: int,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> AddonSnapshot:
    """
    Block until an addon reports the ready status.

    The first check happens immediately; every non-ready observation is
    followed by a budget check and then a fixed delay.

    Raises:
        NotFoundError: If the addon cannot be read
        WaitTimeoutError: If the addon is not ready within the budget
    """
    budget = WaitBudget(start_time=clock(), max_minutes=max_wait_minutes)
    logger.info(f"Checking addon {addon_id}")

    def fetch() -> AddonSnapshot:
        snapshot = AddonSnapshot.from_api(client.get_addon(project_id, addon_id))
        if snapshot is None:
            raise NotFoundError(f"Addon status for {addon_id} could not be checked.")
        return snapshot

    state, snapshot = poll_until_settled(
        fetch,
        classify_addon_status,
        budget,
        poll_interval=poll_interval,
        sleep_first=False,
        sleep=sleep,
        clock=clock,
    )

    if state is WaitState.TIMED_OUT:
        elapsed = budget.elapsed(clock())
        logger.error(
            f"Addon {addon_id} not {ADDON_READY_STATUS} after {elapsed:.0f}s "
            f"(last status={snapshot.status})"
        )
        raise WaitTimeoutError(
            f"Exceeded maximum wait time for addon {addon_id} to go into "
            f"{ADDON_READY_STATUS} (Currently {snapshot.status}).",
            resource_id=addon_id,
            last_status=snapshot.status,
            elapsed_seconds=elapsed,
        )

    logger.info(f"Addon {addon_id} is in state {snapshot.status}")
    return snapshot


def wait_until_concluded(
    client,
    project_id: str,
    addon_id: str,
    backup_id: str,
    max_wait_minutes: int,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> BackupSnapshot:
    """
    Block until a backup or import job completes.

    A freshly created job is never complete, so every fetch (the first one
    included) is preceded by a fixed delay.

    Raises:
        NotFoundError: If the backup cannot be read
        TerminalFailureError: If the backup was aborted, failed or is not supported
        WaitTimeoutError: If the backup is still pending when the budget runs out
    """
    budget = WaitBudget(start_time=clock(), max_minutes=max_wait_minutes)
    logger.info(f"Waiting for backup {backup_id} to complete")

    def fetch() -> BackupSnapshot:
        snapshot = BackupSnapshot.from_api(
            client.get_addon_backup(project_id, addon_id, backup_id)
        )
        if snapshot is None:
            raise NotFoundError(f"Backup status check failed for {backup_id}.")
        return snapshot

    state, snapshot = poll_until_settled(
        fetch,
        classify_backup_status,
        budget,
        poll_interval=poll_interval,
        sleep_first=True,
        sleep=sleep,
        clock=clock,
    )

    if state is WaitState.TIMED_OUT:
        elapsed = budget.elapsed(clock())
        logger.error(
            f"Backup {backup_id} still {snapshot.status} after {elapsed:.0f}s"
        )
        raise WaitTimeoutError(
            f"Exceeded maximum wait time for backup {backup_id} to succeed "
            f"(Currently {snapshot.status}).",
            resource_id=backup_id,
            last_status=snapshot.status,
            elapsed_seconds=elapsed,
        )

    if state is WaitState.FAILED:
        logger.error(f"Backup {backup_id} FAILED with status {snapshot.status}")
        raise TerminalFailureError(
            f"Backup {backup_id} could not be successfully imported "
            f"(status={snapshot.status}).",
            backup_id=backup_id,
            status=snapshot.status,
        )

    logger.info(f"Backup {backup_id} completed")
    return snapshot
