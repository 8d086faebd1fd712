"""Unit tests for chronomock._clock — clock port and virtual clock.

Test Techniques Used:
    - Specification-based Testing: Verifying ClockPort protocol
      contract
    - Protocol Conformance: isinstance checks for structural
      subtyping
    - State-based Testing: advance/set mutate the virtual instant
"""

from __future__ import annotations

from chronomock._clock import INITIAL_EPOCH, ClockPort, VirtualClock


class TestVirtualClock:
    """Tests for VirtualClock.

    Technique: Specification-based Testing — verifying public
    contract.
    """

    def test_satisfies_clock_port_protocol(self) -> None:
        """VirtualClock is recognized as ClockPort."""
        assert isinstance(VirtualClock(), ClockPort)

    def test_starts_at_initial_epoch(self) -> None:
        """Default-constructed clock reads 0."""
        assert VirtualClock().now() == INITIAL_EPOCH == 0

    def test_custom_start(self) -> None:
        """The constructor sets the starting instant."""
        assert VirtualClock(1000).now() == 1000

    def test_advance_moves_forward_and_returns_new_time(self) -> None:
        """advance() adds to the current time."""
        clock = VirtualClock(1000)

        assert clock.advance(500) == 1500
        assert clock.now() == 1500

    def test_set_can_move_backwards(self) -> None:
        """set() jumps to any instant."""
        clock = VirtualClock(1000)
        clock.set(10)

        assert clock.now() == 10


class TestClockPortProtocol:
    """Tests for ClockPort protocol definition.

    Technique: Protocol Conformance — structural subtyping checks.
    """

    def test_custom_class_satisfies_protocol(self) -> None:
        """A class with now() satisfies ClockPort."""

        class FixedClock:
            def now(self) -> float:
                return 42.0

        assert isinstance(FixedClock(), ClockPort)

    def test_class_without_now_does_not_satisfy(self) -> None:
        """A class without now() does not satisfy ClockPort."""

        class NotAClock:
            pass

        assert not isinstance(NotAClock(), ClockPort)
