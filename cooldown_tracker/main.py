"""Cooldown Tracker — entry point for embedding in a host.

Wires together: host signals → CooldownTracker → overlay signals, with a Qt
timer supplying the periodic tick.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from PyQt6.QtCore import QCoreApplication, QObject, QTimer

from cooldown_tracker.config import load_config, save_config
from cooldown_tracker.events import Tick
from cooldown_tracker.host import HostApi
from cooldown_tracker.tracker import CooldownTracker

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Host frame rate is faster than the poll interval; the scheduler rate-limits.
TICK_MS = 16


class TickDriver(QObject):
    """Feeds Tick events to the tracker, measuring elapsed time on the host uptime clock."""

    def __init__(
        self,
        tracker: CooldownTracker,
        host: HostApi,
        interval_ms: int = TICK_MS,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._tracker = tracker
        self._host = host
        self._interval_ms = interval_ms
        self._last_uptime: Optional[float] = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    def start(self) -> None:
        self._last_uptime = self._host.uptime()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def _on_timeout(self) -> None:
        now = self._host.uptime()
        if self._last_uptime is None or now < self._last_uptime:
            # first tick, or the uptime counter wrapped
            elapsed = self._interval_ms / 1000.0
        else:
            elapsed = now - self._last_uptime
        self._last_uptime = now
        try:
            self._tracker.handle(Tick(elapsed))
        except Exception as e:
            logger.error(f"Tick error: {e}", exc_info=True)


def run(
    host: HostApi,
    config_path: Optional[Path] = None,
    on_ready: Optional[Callable[[CooldownTracker], None]] = None,
) -> int:
    """Start tracking against ``host`` and run the Qt event loop until it quits.

    ``on_ready`` receives the tracker before the first tick so the host can
    route its signals into handle() and connect an overlay to the tracker signals.
    """
    config = load_config(config_path)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)

    tracker = CooldownTracker(host, config)
    if on_ready is not None:
        on_ready(tracker)
    tracker.start()
    driver = TickDriver(tracker, host)
    driver.start()

    exit_code = app.exec()

    driver.stop()
    save_config(config, config_path)
    return exit_code
