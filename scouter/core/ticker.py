"""Ticker controller: run-condition reconciliation, tick loop, shutdown trigger.

Pure logic, no UI. The host supplies a Scheduler, a render sink and a shutdown
sink. What gets rendered is always the configured constant label; elapsed
time since the base is measured on every tick but only ever used to decide
when to ask the host to shut down.
"""

from collections.abc import Callable
from scouter.common.logger import log
from scouter.core.config import TickerConfig
from scouter.core.scheduler import Scheduler

_MINUTE_MILLIS = 60 * 1000
_HOUR_MILLIS = 60 * _MINUTE_MILLIS


# Remainder whose sign follows the dividend, so a base set in the future reads as negative elapsed time.
def _remainder(value, modulus):
    if value < 0:
        return -(-value % modulus)
    return value % modulus


def reduce_elapsed(millis):
    """Fold elapsed milliseconds down to the position within the current minute.

    The hour reduction is subsumed by the minute one and changes nothing, but
    both steps are kept so the value matches the deployed behaviour exactly.
    """
    millis = _remainder(millis, _HOUR_MILLIS)
    millis = _remainder(millis, _MINUTE_MILLIS)
    return millis


class TickerController:
    """Starts and stops a repeating tick from three independent flags.

    running == (visible or force_start) and started holds after every public
    call returns, and the tick is scheduled if and only if running is true.
    """

    def __init__(
            self,
            scheduler: Scheduler,
            render: Callable[[str, float, str], None],
            shutdown: Callable[[], None],
            config: TickerConfig | None = None,
            base_millis: int | None = None,
    ):
        self._scheduler = scheduler
        self._render = render
        self._shutdown = shutdown
        self.config = config or TickerConfig()

        self._started = False
        self._force_start = False
        self._visible = False
        self._running = False
        self._listener = None

        self._pending = None
        self._shutdown_latched = False
        self.last_elapsed_millis = 0

        self.set_base_millis(scheduler.now() if base_millis is None else base_millis)

    #region === Public contract ===

    # Set the base value, in monotonic milliseconds, that elapsed time is measured from.
    def set_base_millis(self, base_millis: int) -> None:
        self._base_millis = int(base_millis)
        self._update_text()

    def get_base_millis(self) -> int:
        return self._base_millis

    # Replace the change listener. Passing None clears it.
    def set_listener(self, listener: Callable[[], None] | None) -> None:
        self._listener = listener

    # Whether to keep ticking while the host surface is not visible.
    def set_force_start(self, force_start: bool) -> None:
        self._force_start = bool(force_start)
        self._update_running()

    def start(self) -> None:
        self._started = True
        self._update_running()

    def stop(self) -> None:
        self._started = False
        self._update_running()

    def on_host_detached(self) -> None:
        self._visible = False
        self._update_running()

    def on_host_visibility_changed(self, is_visible: bool) -> None:
        self._visible = bool(is_visible)
        self._update_running()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def started(self) -> bool:
        return self._started

    @property
    def force_start(self) -> bool:
        return self._force_start

    @property
    def visible(self) -> bool:
        return self._visible

    #endregion === Public contract ===

    #region === Scheduling ===

    def _update_running(self):
        running = (self._visible or self._force_start) and self._started
        if running == self._running:
            return
        self._running = running
        if running:
            # New run session, so the shutdown trigger is armed again.
            self._shutdown_latched = False
            self._cancel_pending()
            self._pending = self._scheduler.call_later(0, self._on_tick)
            log.debug(f"Ticker started (visible={self._visible}, force_start={self._force_start})")
        else:
            self._cancel_pending()
            log.debug(f"Ticker stopped (started={self._started}, visible={self._visible}, force_start={self._force_start})")

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _on_tick(self):
        self._pending = None
        if not self._running:
            return
        self._update_text()
        # Anything called during the update may have stopped us, or stopped and restarted us.
        if self._running and self._pending is None:
            self._pending = self._scheduler.call_later(self.config.delay_millis, self._on_tick)

    #endregion === Scheduling ===

    #region === Tick body ===

    def _update_text(self):
        millis = reduce_elapsed(self._scheduler.now() - self._base_millis)
        self.last_elapsed_millis = millis

        try:
            self._render(self.config.label, self.config.label_size, self.config.label_color)
        except Exception:
            log.exception("Render sink raised during tick, continuing")

        self._check_shutdown(millis)

        if self._listener is not None:
            try:
                self._listener()
            except Exception:
                log.exception("Change listener raised during tick, continuing")

    def _check_shutdown(self, millis):
        # Whole seconds, truncated, so the default threshold of 2 first trips at 3000 ms.
        seconds = int(millis / 1000)
        if seconds <= self.config.shutdown_threshold_seconds:
            # Back under the threshold (the minute wrapped), so the next crossing counts again.
            self._shutdown_latched = False
            return
        if self._shutdown_latched:
            return
        self._shutdown_latched = True
        log.info(f"Elapsed {millis} ms is past the {self.config.shutdown_threshold_seconds}s threshold, requesting host shutdown")
        try:
            self._shutdown()
        except Exception:
            log.exception("Shutdown sink raised, leaving the trigger latched")

    #endregion === Tick body ===
