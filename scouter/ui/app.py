import sys
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QMainWindow
from scouter.common.logger import log
from scouter.core import config
from scouter.core.config import TickerConfig
from scouter.ui.view import ScouterView


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Window hosting the single scouter card. Closing it detaches the view so the ticker lets go of its timer.
class ScouterWindow(QMainWindow):

    def __init__(self, ticker_config=None, scheduler=None):
        super().__init__()
        self.setWindowTitle("Scouter")
        self.setStyleSheet("QMainWindow { background-color: black; }")
        self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        self.view = ScouterView(ticker_config, scheduler, self)
        self.setCentralWidget(self.view)

    def closeEvent(self, event):
        self.view.detach()
        event.accept()


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

# Owns the window for as long as the scouter is live. It is also the shutdown sink: once the view asks for it,
# the service stops itself, which closes the window and ends the Qt loop.
class ScouterService:

    def __init__(self, settings=None, scheduler=None, quit_app=True):
        settings = settings if settings is not None else config.load_settings()
        self.settings = settings
        self.quit_app = quit_app
        self.stopped = False

        self.window = ScouterWindow(TickerConfig.from_settings(settings), scheduler)
        self.view = self.window.view
        self.view.set_force_start(settings["force_start"])
        self.view.shutdown_requested.connect(self.stop_self)

    def start(self):
        log.info("Starting scouter service")
        self.window.show()
        self.view.start()

    def stop_self(self):
        if self.stopped:
            return
        self.stopped = True
        log.info("Stopping scouter service")
        self.view.stop()
        self.window.close()
        if self.quit_app:
            app = QApplication.instance()
            if app is not None:
                app.quit()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    service = ScouterService()
    service.start()
    sys.exit(app.exec())
