"""Tests for PreviewManager bookkeeping."""
from __future__ import annotations

import unittest

from livetpl.core.interfaces.preview import PreviewProtocol
from livetpl.core.models import ApplyResult
from livetpl.rendering.preview import PreviewManager


class RecordingPreview:
    def __init__(self):
        self.events = []

    def preview_changed(self, line_number, text):
        self.events.append(("changed", line_number, text))

    def preview_closed(self, line_number):
        self.events.append(("closed", line_number))


class BrokenPreview(RecordingPreview):
    def preview_changed(self, line_number, text):
        raise RuntimeError("display gone")


class PreviewManagerTests(unittest.TestCase):
    def test_recording_preview_fulfills_protocol(self):
        self.assertIsInstance(RecordingPreview(), PreviewProtocol)

    def test_changed_lines_are_rebased(self):
        sink = RecordingPreview()
        mgr = PreviewManager(sink, line_base=10)
        shown = mgr.show(ApplyResult(["a", "b", "c"], [1, 3]))
        self.assertEqual(shown, [10, 12])
        self.assertEqual(sink.events, [("changed", 10, "a"), ("changed", 12, "c")])

    def test_unchanged_text_is_not_resent(self):
        sink = RecordingPreview()
        mgr = PreviewManager(sink)
        mgr.show(ApplyResult(["a"], [1]))
        mgr.show(ApplyResult(["a"], [1]))
        self.assertEqual(sink.events, [("changed", 1, "a")])

    def test_lines_no_longer_changed_are_closed(self):
        sink = RecordingPreview()
        mgr = PreviewManager(sink)
        mgr.show(ApplyResult(["x", "y"], [1, 2]))
        mgr.show(ApplyResult(["xy"], [1]))
        self.assertEqual(
            sink.events,
            [("changed", 1, "x"), ("changed", 2, "y"), ("closed", 2), ("changed", 1, "xy")],
        )
        self.assertEqual(mgr.open_previews, {1: "xy"})

    def test_context_exit_closes_everything(self):
        sink = RecordingPreview()
        with PreviewManager(sink) as mgr:
            mgr.show(ApplyResult(["a", "b"], [1, 2]))
        self.assertEqual(sink.events[-2:], [("closed", 1), ("closed", 2)])
        self.assertEqual(mgr.open_previews, {})

    def test_sink_failures_are_swallowed(self):
        mgr = PreviewManager(BrokenPreview())
        with self.assertLogs("livetpl.preview", level="WARNING"):
            self.assertEqual(mgr.show(ApplyResult(["a"], [1])), [1])
        self.assertEqual(mgr.open_previews, {1: "a"})

    def test_without_sink_state_is_still_tracked(self):
        mgr = PreviewManager(None)
        mgr.show(ApplyResult(["a"], [1]))
        self.assertEqual(mgr.open_previews, {1: "a"})
        mgr.close_all()
        self.assertEqual(mgr.open_previews, {})


if __name__ == "__main__":
    unittest.main()
