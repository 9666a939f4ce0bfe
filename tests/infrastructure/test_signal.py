"""Tests for change signals and tokens."""

from __future__ import annotations

from strata.infrastructure.signal import Signal


class TestSignal:
    def test_fresh_token_unchanged(self) -> None:
        signal = Signal()
        assert not signal.get_token("k").has_changed

    def test_signal_expires_earlier_tokens(self) -> None:
        signal = Signal()
        token = signal.get_token("k")
        signal.signal_token("k")
        assert token.has_changed

    def test_token_issued_after_signal_is_fresh(self) -> None:
        signal = Signal()
        signal.signal_token("k")
        assert not signal.get_token("k").has_changed

    def test_keys_are_independent(self) -> None:
        signal = Signal()
        token = signal.get_token("a")
        signal.signal_token("b")
        assert not token.has_changed

    def test_epochs_advance_monotonically(self) -> None:
        signal = Signal()
        assert signal.epoch("k") == 0
        assert signal.signal_token("k") == 1
        assert signal.signal_token("k") == 2
        assert signal.epoch("k") == 2
