from src.scoring.ledger import FrameLedger
from tests.factories import make_frame


def test_empty_ledger() -> None:
    ledger = FrameLedger()
    assert len(ledger) == 0
    assert not ledger
    assert ledger.last is None
    assert ledger.pop() is None


def test_append_and_pop_most_recent() -> None:
    first, second = make_frame(1, "alice", 1, 0), make_frame(2, "bob", 1, 1)
    ledger = FrameLedger([first])
    ledger.append(second)

    assert ledger.frames == (first, second)
    assert ledger.last == second
    assert ledger.pop() == second
    assert list(ledger) == [first]


def test_frames_is_a_copy() -> None:
    """Callers cannot edit the ledger through the tuple they get back."""
    ledger = FrameLedger([make_frame(1, "alice", 1, 0)])
    frames = ledger.frames
    ledger.clear()
    assert len(frames) == 1
    assert len(ledger) == 0
