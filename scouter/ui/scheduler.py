import time
from PySide6.QtCore import QObject, QTimer
from scouter.core.scheduler import Scheduler, TimerHandle

# A TimerHandle backed by its own single-shot QTimer. Stopping a QTimer on the GUI thread guarantees its timeout
# will not be delivered afterwards, so cancel() is complete once it returns.
class QtTimerHandle(TimerHandle):

    def __init__(self, callback, delay_millis, parent=None):
        super().__init__(callback)
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)
        self._timer.start(max(0, int(delay_millis)))

    def cancel(self):
        super().cancel()
        self._dispose()

    def _on_timeout(self):
        self._dispose()
        self._fire()

    def _dispose(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

# Scheduler for the Qt host. Clock is time.monotonic() in whole milliseconds, timers are parented to `owner` so
# they are torn down with it.
class QtScheduler(Scheduler):

    def __init__(self, owner: QObject | None = None):
        self._owner = owner

    def now(self):
        return int(time.monotonic() * 1000)

    def call_later(self, delay_millis, callback):
        return QtTimerHandle(callback, delay_millis, self._owner)
