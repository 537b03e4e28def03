"""Background refresh of the role snapshot and handler allow-list on a fixed interval."""

import logging
import threading
from dataclasses import dataclass

from rolodex.services.handler_allow_list import HandlerAllowListCache
from rolodex.services.role_snapshot import RoleSnapshotCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of one refresh cycle, per data source."""

    allow_list_ok: bool
    roles_ok: bool


def run_refresh_cycle(
    roles: RoleSnapshotCache,
    allow_list: HandlerAllowListCache,
) -> RefreshResult:
    """
    Refresh both sources once. Each source is isolated: a failure in one
    neither skips nor invalidates the other.
    """
    allow_list_ok = allow_list.refresh()
    roles_ok = roles.refresh()
    return RefreshResult(allow_list_ok=allow_list_ok, roles_ok=roles_ok)


class RefreshScheduler:
    """
    Daemon thread calling run_refresh_cycle every interval seconds.

    The first cycle runs immediately on start. Cycles never overlap within one
    scheduler; a slow cycle delays the next tick rather than stacking up.
    """

    def __init__(
        self,
        roles: RoleSnapshotCache,
        allow_list: HandlerAllowListCache,
        interval: float = 5.0,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._roles = roles
        self._allow_list = allow_list
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._cycles = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def cycles(self) -> int:
        """Number of completed cycles (successful or not)."""
        return self._cycles

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="rolodex-refresh", daemon=True
        )
        self._thread.start()
        logger.info("Started role refresh every %ss", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait for the in-flight cycle to finish."""
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout)
        self._thread = None
        logger.info("Stopped role refresh after %s cycles", self._cycles)

    def run_once(self) -> RefreshResult:
        result = run_refresh_cycle(self._roles, self._allow_list)
        self._cycles += 1
        return result

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                # run_refresh_cycle contains source failures; this keeps the loop alive on anything else
                logger.exception("Refresh cycle failed unexpectedly.")
            self._stop_event.wait(self._interval)
