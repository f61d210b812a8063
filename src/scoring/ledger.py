"""Append-only log of the Frames scored in a match. Undo pops the most recent entry, nothing is edited in place."""

from typing import Iterable, Iterator, Optional

from src.core.models import Frame


class FrameLedger:
    def __init__(self, frames: Iterable[Frame] = ()) -> None:
        self._frames: list[Frame] = list(frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    def __repr__(self) -> str:
        return f"FrameLedger({len(self._frames)} frames)"

    @property
    def frames(self) -> tuple[Frame, ...]:
        return tuple(self._frames)

    @property
    def last(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    def append(self, frame: Frame) -> None:
        self._frames.append(frame)

    def pop(self) -> Optional[Frame]:
        """Remove and return the most recent frame (None when empty)."""
        if not self._frames:
            return None
        return self._frames.pop()

    def clear(self) -> None:
        self._frames.clear()
