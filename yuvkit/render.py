"""Render-side scheduling: the scene queue, render timing and source rectangles."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Optional, Tuple

from .interface import INVALID_PTS

DEFAULT_RENDER_INTERVAL = 16.0  # milliseconds, the first guess of one render cycle
_SMOOTHING = 0.1
_MAX_SPEED_SAMPLE_MS = 1000


@dataclass(frozen=True)
class Rect:
    """An integer rectangle with inclusive right and bottom edges."""

    left: int = 0
    top: int = 0
    right: int = -1
    bottom: int = -1

    @classmethod
    def from_size(cls, left: int, top: int, width: int, height: int) -> "Rect":
        return cls(left, top, left + width - 1, top + height - 1)

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    def scaled(self, scale_x: float, scale_y: float) -> "Rect":
        """Each edge multiplied by its scale and truncated towards zero."""
        return Rect(
            int(self.left * scale_x),
            int(self.top * scale_y),
            int(self.right * scale_x),
            int(self.bottom * scale_y),
        )


class RenderQueue:
    """Scenes waiting to be shown, with their presentation times.

    A seeking scene makes every scene queued before it obsolete.
    """

    def __init__(self) -> None:
        self._entries: Deque[Tuple[Any, int, bool]] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, scene: Any, pts: int, seeking: bool) -> None:
        self._entries.append((scene, pts, bool(seeking)))

    def _drop_before_last_seek(self) -> None:
        last_seek = -1
        for i, (_, _, seeking) in enumerate(self._entries):
            if seeking:
                last_seek = i
        for _ in range(max(last_seek, 0)):
            self._entries.popleft()

    def peek(self) -> Optional[Tuple[int, bool]]:
        """``(pts, seeking)`` of the scene to show next, or None when empty."""
        self._drop_before_last_seek()
        if not self._entries:
            return None
        _, pts, seeking = self._entries[0]
        return pts, seeking

    def pop(self) -> Tuple[Any, int, bool]:
        """Remove and return ``(scene, pts, seeking)`` of the next scene."""
        self._drop_before_last_seek()
        if not self._entries:
            raise IndexError("render queue is empty")
        return self._entries.popleft()


class RenderClock:
    """Decides when the next scene is due and tracks the playback speed ratio.

    ``is_due`` is asked once per render cycle; it counts the cycles since
    the last shown scene and compares them with the averaged cycle length.
    """

    def __init__(self) -> None:
        self.render_interval = DEFAULT_RENDER_INTERVAL
        self.speed_ratio = 1.0
        self.counter = 0
        self.last_pts = INVALID_PTS
        self.last_seeking = False

    def _pts_step(self, pts: int, seeking: bool) -> int:
        if (
            not seeking
            and pts != INVALID_PTS
            and self.last_pts != INVALID_PTS
            and pts > self.last_pts
        ):
            return pts - self.last_pts
        return 0

    def is_due(self, next_pts: int, seeking: bool) -> bool:
        """Count one render cycle and tell whether the scene at ``next_pts`` is due."""
        self.counter += 1
        if next_pts == INVALID_PTS:
            return False
        if seeking:
            return True
        step = self._pts_step(next_pts, seeking)
        return step < self.counter * self.render_interval + self.render_interval / 2

    def record_cycle(self, elapsed_ms: float) -> float:
        """Fold the length of one render cycle into the average; returns it."""
        self.render_interval += _SMOOTHING * (elapsed_ms - self.render_interval)
        return self.render_interval

    def record_frame(self, pts: int, seeking: bool, elapsed_ms: float) -> float:
        """Note that the scene at ``pts`` was shown ``elapsed_ms`` after the last one.

        Returns the updated speed ratio.
        """
        step = self._pts_step(pts, seeking)
        if 0 < step <= _MAX_SPEED_SAMPLE_MS and 0 < elapsed_ms <= _MAX_SPEED_SAMPLE_MS:
            self.speed_ratio += _SMOOTHING * (step / elapsed_ms - self.speed_ratio)
        self.last_pts = pts
        self.last_seeking = bool(seeking)
        self.counter = 0
        return self.speed_ratio