"""
Unit tests for feedback emitter.
"""

from unittest.mock import Mock

from barcode_scanning.services import FeedbackEmitter, terminal_bell


class TestFeedbackEmitter:
    """Test suite for FeedbackEmitter class."""

    def test_success_plays_tone_and_vibrates(self):
        tone = Mock()
        vibrate = Mock()
        emitter = FeedbackEmitter(tone=tone, vibrate=vibrate)

        emitter.success()

        tone.assert_called_once_with(800, 100)
        vibrate.assert_called_once_with(50)

    def test_disabled_sinks_are_not_called(self):
        tone = Mock()
        vibrate = Mock()
        emitter = FeedbackEmitter(
            tone=tone,
            vibrate=vibrate,
            enable_sound=False,
            enable_vibration=False
        )

        emitter.success()

        tone.assert_not_called()
        vibrate.assert_not_called()

    def test_missing_sinks_are_skipped(self):
        emitter = FeedbackEmitter(tone=None, vibrate=None)

        emitter.success()

    def test_failing_tone_does_not_block_vibration(self):
        tone = Mock(side_effect=OSError("no audio device"))
        vibrate = Mock()
        emitter = FeedbackEmitter(tone=tone, vibrate=vibrate)

        emitter.success()

        vibrate.assert_called_once_with(50)

    def test_failing_vibration_is_swallowed(self):
        emitter = FeedbackEmitter(tone=None, vibrate=Mock(side_effect=RuntimeError("unsupported")))

        emitter.success()

    def test_default_emitter_is_silent(self, capsys):
        emitter = FeedbackEmitter()

        emitter.success()

        assert capsys.readouterr().out == ''

    def test_terminal_bell_sink_rings_bell(self, capsys):
        emitter = FeedbackEmitter(tone=terminal_bell)

        emitter.success()

        assert capsys.readouterr().out == '\a'
