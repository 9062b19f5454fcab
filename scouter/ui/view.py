"""Scouter view: a QLabel card driven by a TickerController.

The view is the host surface for the controller. It renders whatever the
controller hands it, and reports its own visibility and teardown back.
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget
from scouter.common.logger import log
from scouter.core.config import TickerConfig
from scouter.core.ticker import TickerController
from scouter.ui.scheduler import QtScheduler


class ScouterView(QWidget):
    """Card view showing the ticker label.

    Emits ``shutdown_requested`` when the controller decides the host should
    stop itself. Whoever owns the view decides what stopping means.
    """

    shutdown_requested = Signal()

    def __init__(self, config: TickerConfig | None = None, scheduler=None, parent=None):
        super().__init__(parent)
        self.setObjectName("scouterView")

        self._label = QLabel(self)
        self._label.setObjectName("mainview")
        self._label.setAlignment(Qt.AlignCenter)
        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self._label)

        self._detached = False
        self.ticker = TickerController(
            scheduler or QtScheduler(self),
            render=self._render,
            shutdown=self.shutdown_requested.emit,
            config=config,
        )

    # ------------------------------------------------------------------ #
    #  Render sink                                                         #
    # ------------------------------------------------------------------ #

    def _render(self, text, size, color):
        self._label.setText(text)
        font = QFont(self._label.font())
        font.setPointSizeF(size)
        self._label.setFont(font)
        palette = self._label.palette()
        palette.setColor(QPalette.WindowText, QColor(color))
        self._label.setPalette(palette)

    def text(self):
        return self._label.text()

    def label(self):
        return self._label

    # ------------------------------------------------------------------ #
    #  Controller delegation                                               #
    # ------------------------------------------------------------------ #

    def set_base_millis(self, base_millis):
        self.ticker.set_base_millis(base_millis)

    def get_base_millis(self):
        return self.ticker.get_base_millis()

    def set_listener(self, listener):
        self.ticker.set_listener(listener)

    def set_force_start(self, force_start):
        self.ticker.set_force_start(force_start)

    def start(self):
        self.ticker.start()

    def stop(self):
        self.ticker.stop()

    # ------------------------------------------------------------------ #
    #  Host lifecycle                                                      #
    # ------------------------------------------------------------------ #

    def showEvent(self, event):
        super().showEvent(event)
        if not self._detached:
            self.ticker.on_host_visibility_changed(True)

    def hideEvent(self, event):
        super().hideEvent(event)
        self.ticker.on_host_visibility_changed(False)

    def detach(self):
        """Release the ticker for good. Safe to call more than once."""
        if not self._detached:
            log.debug("Scouter view detached from host")
        self._detached = True
        self.ticker.on_host_detached()
