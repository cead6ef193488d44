"""Watch mode: rebuild the sprite whenever the input directory changes.

A background thread polls the input directory and reports changes. The
watch loop waits until changes have settled for the debounce interval, then
runs one synchronous rebuild. Changes that arrive while a rebuild is running
are coalesced into at most one follow-up rebuild. stop() lets a running
rebuild finish before the loop exits; it is safe to call from a signal
handler.
"""

import logging
import threading
import time
from collections.abc import Callable

from svg_sheet.exceptions import SvgSheetError
from svg_sheet.models.config import BuildConfig, WatchConfig
from svg_sheet.sprite.incremental import IncrementalBuilder
from svg_sheet.utils.file_utils import PathLike, Snapshot, directory_snapshot

logger = logging.getLogger(__name__)


class DirectoryPoller:
    """Polls a directory for SVG changes on a background thread.

    Attributes:
        directory: Directory being watched
        interval: Seconds between snapshots
    """

    def __init__(
        self,
        directory: PathLike,
        on_change: Callable[[], None],
        interval: float,
        exclude: PathLike | None = None,
    ) -> None:
        """Initialize the poller.

        Args:
            directory: Directory to watch.
            on_change: Called from the poller thread when a snapshot differs.
            interval: Seconds between snapshots.
            exclude: File to ignore, typically the sprite itself.
        """
        self.directory = directory
        self.interval = interval
        self._on_change = on_change
        self._exclude = exclude
        self._last: Snapshot | None = None
        self._halt = threading.Event()
        self._thread = threading.Thread(target=self._run, name="svg-sheet-poller", daemon=True)

    def _snapshot(self) -> Snapshot | None:
        try:
            return directory_snapshot(self.directory, self._exclude)
        except OSError as e:
            logger.error(f"Cannot read {self.directory}: {e}")
            return None

    def poll_once(self) -> bool:
        """Take a snapshot and report a change if it differs from the last one.

        Returns:
            True if a change was reported.
        """
        current = self._snapshot()
        if current is None or current == self._last:
            return False
        self._last = current
        self._on_change()
        return True

    def _run(self) -> None:
        while not self._halt.wait(self.interval):
            self.poll_once()

    def start(self) -> None:
        """Record the baseline snapshot and start polling."""
        self._last = self._snapshot()
        self._thread.start()

    def halt(self) -> None:
        """Ask the polling thread to stop without waiting for it."""
        self._halt.set()

    def stop(self) -> None:
        """Stop polling and wait for the thread to end."""
        self.halt()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval + 1)


class SpriteWatcher:
    """Runs debounced incremental rebuilds until stopped.

    Attributes:
        build_config: Build configuration
        watch_config: Debounce and poll settings
        builder: Incremental builder shared by all rebuilds
        rebuilds: Number of rebuilds attempted so far
    """

    def __init__(
        self,
        build_config: BuildConfig,
        watch_config: WatchConfig,
        builder: IncrementalBuilder | None = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            build_config: Build configuration.
            watch_config: Debounce and poll settings.
            builder: Builder to use; one is created from build_config by default.
        """
        self.build_config = build_config
        self.watch_config = watch_config
        self.builder = builder if builder is not None else IncrementalBuilder(build_config)
        self.rebuilds = 0
        # Reentrant so stop() can run in a signal handler on the waiting thread
        self._cond = threading.Condition(threading.RLock())
        self._dirty = False
        self._stopping = False
        self._last_change = 0.0
        self._poller = DirectoryPoller(
            build_config.directory,
            self.notify_change,
            watch_config.poll_interval_seconds,
            exclude=build_config.output,
        )

    @property
    def stopping(self) -> bool:
        """Whether stop() has been called."""
        with self._cond:
            return self._stopping

    def notify_change(self) -> None:
        """Report a change; a rebuild follows once changes settle."""
        with self._cond:
            self._dirty = True
            self._last_change = time.monotonic()
            self._cond.notify_all()

    def stop(self) -> None:
        """Request shutdown; a rebuild in progress is allowed to finish."""
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
        self._poller.halt()

    def _wait_for_change(self) -> bool:
        """Block until a debounced change is pending or stop() is called.

        Returns:
            True if a rebuild should run, False on shutdown.
        """
        debounce = self.watch_config.debounce_seconds
        with self._cond:
            while not self._stopping:
                if not self._dirty:
                    self._cond.wait(self.watch_config.poll_interval_seconds)
                    continue
                remaining = self._last_change + debounce - time.monotonic()
                if remaining <= 0:
                    self._dirty = False
                    return True
                self._cond.wait(remaining)
            return False

    def _rebuild(self) -> None:
        self.rebuilds += 1
        try:
            result = self.builder.rebuild()
        except SvgSheetError as e:
            logger.error(f"Rebuild failed: {e}")
            return
        for name in result.reprocessed:
            logger.debug(f"Reprocessed {name}")

    def run(self) -> None:
        """Build once, then rebuild on every settled change until stopped."""
        logger.info(
            f"Watching {self.build_config.directory} for changes "
            f"(debounce {self.watch_config.debounce_ms} ms)"
        )
        self._poller.start()
        try:
            if not self.stopping:
                self._rebuild()
            while self._wait_for_change():
                self._rebuild()
        finally:
            self._poller.stop()
        logger.info("Watch stopped")
