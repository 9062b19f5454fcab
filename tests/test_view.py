from __future__ import annotations

import os
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtGui import QPalette
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QApplication

from scouter.core.config import TickerConfig, build_default_settings
from scouter.core.scheduler import SimulatedScheduler
from scouter.ui.app import ScouterService
from scouter.ui.scheduler import QtScheduler
from scouter.ui.view import ScouterView


class _QtTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._app = QApplication.instance() or QApplication([])


class ScouterViewTest(_QtTestCase):

    def setUp(self) -> None:
        self.scheduler = SimulatedScheduler(1_000)
        self.view = ScouterView(scheduler=self.scheduler)

    def tearDown(self) -> None:
        self.view.detach()
        self.view.deleteLater()
        self._app.processEvents()

    def test_renders_label_on_construction(self) -> None:
        self.assertEqual(self.view.text(), "9001")
        self.assertEqual(self.view.label().font().pointSizeF(), 110.0)
        self.assertEqual(self.view.label().palette().color(QPalette.WindowText).name(), "#ff0000")
        self.assertFalse(self.view.ticker.running)

    def test_custom_config_is_rendered(self) -> None:
        view = ScouterView(TickerConfig(label="8000", label_size=20.0, label_color="blue"), self.scheduler)
        self.assertEqual(view.text(), "8000")
        self.assertEqual(view.label().font().pointSizeF(), 20.0)
        self.assertEqual(view.label().palette().color(QPalette.WindowText).name(), "#0000ff")
        view.deleteLater()

    def test_show_and_hide_drive_visibility(self) -> None:
        self.view.start()
        self.assertFalse(self.view.ticker.running)

        self.view.show()
        self._app.processEvents()
        self.assertTrue(self.view.ticker.visible)
        self.assertTrue(self.view.ticker.running)

        self.view.hide()
        self._app.processEvents()
        self.assertFalse(self.view.ticker.running)
        self.assertEqual(self.scheduler.pending_count(), 0)

    def test_detach_releases_the_ticker(self) -> None:
        self.view.set_force_start(True)
        self.view.start()
        self.assertTrue(self.view.ticker.running)
        self.view.stop()
        self.view.detach()
        self.view.show()
        self._app.processEvents()
        self.assertFalse(self.view.ticker.visible)
        self.assertEqual(self.scheduler.pending_count(), 0)

    def test_delegates_base_and_listener(self) -> None:
        calls = []
        self.view.set_listener(lambda: calls.append(True))
        self.view.set_base_millis(500)
        self.assertEqual(self.view.get_base_millis(), 500)
        self.assertEqual(calls, [True])

    def test_shutdown_signal_emitted_past_threshold(self) -> None:
        emitted = []
        self.view.shutdown_requested.connect(lambda: emitted.append(True))
        self.view.set_force_start(True)
        self.view.start()
        self.scheduler.advance(3_500)
        self.assertEqual(emitted, [True])


class ScouterServiceTest(_QtTestCase):

    def test_service_stops_itself_after_threshold(self) -> None:
        scheduler = SimulatedScheduler(0)
        service = ScouterService(build_default_settings(), scheduler, quit_app=False)
        service.start()
        self._app.processEvents()
        self.assertTrue(service.window.isVisible())
        self.assertTrue(service.view.ticker.running)

        scheduler.advance(2_900)
        self.assertFalse(service.stopped)

        scheduler.advance(200)
        self._app.processEvents()
        self.assertTrue(service.stopped)
        self.assertFalse(service.window.isVisible())
        self.assertFalse(service.view.ticker.running)
        self.assertEqual(scheduler.pending_count(), 0)
        service.window.deleteLater()
        self._app.processEvents()

    def test_force_start_setting_is_applied(self) -> None:
        settings = build_default_settings()
        settings["force_start"] = True
        service = ScouterService(settings, SimulatedScheduler(0), quit_app=False)
        self.assertTrue(service.view.ticker.force_start)
        service.view.start()
        self.assertTrue(service.view.ticker.running)
        service.stop_self()
        self.assertTrue(service.stopped)
        self.assertFalse(service.view.ticker.running)
        service.window.deleteLater()
        self._app.processEvents()


class QtSchedulerTest(_QtTestCase):

    def test_cancelled_timer_never_fires(self) -> None:
        scheduler = QtScheduler()
        seen = []
        handle = scheduler.call_later(0, lambda: seen.append(True))
        handle.cancel()
        self._app.processEvents()
        self.assertEqual(seen, [])

    def test_timer_fires_once_and_disposes(self) -> None:
        scheduler = QtScheduler()
        seen = []
        handle = scheduler.call_later(5, lambda: seen.append(scheduler.now()))
        QTest.qWait(100)
        self.assertEqual(len(seen), 1)
        self.assertIsNone(handle._timer)
        handle.cancel()
        QTest.qWait(20)
        self.assertEqual(len(seen), 1)

    def test_view_ticks_on_real_timers(self) -> None:
        view = ScouterView(TickerConfig(delay_millis=10))
        ticks = []
        view.set_listener(lambda: ticks.append(True))
        view.set_force_start(True)
        view.start()
        QTest.qWait(300)
        self.assertGreater(len(ticks), 5)

        view.stop()
        settled = len(ticks)
        QTest.qWait(50)
        self.assertEqual(len(ticks), settled)
        view.detach()
        view.deleteLater()
        self._app.processEvents()

    def test_clock_is_monotonic_millis(self) -> None:
        scheduler = QtScheduler()
        first = scheduler.now()
        self.assertIsInstance(first, int)
        self.assertGreaterEqual(scheduler.now(), first)


if __name__ == "__main__":
    unittest.main()
