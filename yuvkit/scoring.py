"""Subjective test score sheets and playlist shuffling."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

NOT_RATED = "Not_rated"
MODES = ("slider", "button")


class ScoreSheet:
    """Ratings given by a viewer to a number of test conditions.

    In ``slider`` mode every condition has a slider between ``minimum``
    and ``maximum``; in ``button`` mode one condition is chosen.
    """

    def __init__(
        self,
        count: int,
        names: Sequence[str] = (),
        minimum: int = 0,
        maximum: int = 100,
        scale: Sequence[str] = (),
        mode: str = "slider",
    ) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown score mode {mode!r}")
        if count <= 0:
            raise ValueError("a score sheet needs at least one condition")
        if minimum > maximum:
            raise ValueError("minimum is larger than maximum")
        self.count = count
        self.mode = mode
        self.names = list(names) or [str(i) for i in range(count)]
        self.minimum = minimum
        self.maximum = maximum
        self.scale = list(scale)
        self._positions: List[int] = []
        self._ratings: List[Optional[int]] = []
        self.selected: Optional[int] = None
        self._sscqe = ""
        self.reset()

    @property
    def tick_interval(self) -> int:
        if not self.scale:
            return 0
        return (self.maximum - self.minimum) // len(self.scale)

    @property
    def ratings(self) -> List[Optional[int]]:
        return list(self._ratings)

    def _label(self, index: int) -> str:
        rating = self._ratings[index]
        return NOT_RATED if rating is None else str(rating)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.count:
            raise IndexError(f"condition {index} out of range")

    def set_slider(self, index: int, value: int) -> Optional[int]:
        """Move a slider; a move to its current position does not rate it."""
        self._check_index(index)
        value = min(max(int(value), self.minimum), self.maximum)
        if value != self._positions[index]:
            self._positions[index] = value
            self._ratings[index] = value
        return self._ratings[index]

    def select_button(self, index: int) -> str:
        """Choose one condition; returns its name."""
        self._check_index(index)
        self.selected = index
        return self.names[index]

    def reset(self) -> None:
        """Clear all ratings and the selection."""
        start = min(max(0, self.minimum), self.maximum)
        self._positions = [start] * self.count
        self._ratings = [None] * self.count
        self.selected = None

    def ready(self) -> bool:
        """True once every slider is rated, or a button chosen."""
        if self.mode == "button":
            return self.selected is not None
        return all(r is not None for r in self._ratings)

    def _files(self, file_list: Sequence[str]) -> List[str]:
        if len(file_list) < self.count:
            raise IndexError(f"{self.count} file names needed, {len(file_list)} given")
        return list(file_list[: self.count])

    def slider_results(self, file_list: Sequence[str]) -> str:
        """Slider ratings as one ``{"file":rating,...}`` line."""
        entries = (f'"{name}":{self._label(i)}' for i, name in enumerate(self._files(file_list)))
        return "{" + ",".join(entries) + "}\n"

    def button_results(self, file_list: Sequence[str]) -> str:
        """Button choice as one ``{"file":1 or 0,...}`` line."""
        entries = (
            f'"{name}":{1 if i == self.selected else 0}'
            for i, name in enumerate(self._files(file_list))
        )
        return "{" + ",".join(entries) + "}\n"

    def add_timestamp_result(self, timestamp) -> str:
        """Record the first slider's rating at a time stamp; returns the entry."""
        entry = f"({self._label(0)}:{timestamp}),"
        self._sscqe += entry
        return entry

    def sscqe_results(self, video: str) -> str:
        """All recorded time stamp entries for ``video``; clears them."""
        text = '{"' + video + '":' + self._sscqe + "}"
        self._sscqe = ""
        return text


def shuffle_list(
    origin: Sequence[Sequence[str]],
    shuffle_scene: bool,
    shuffle_video: bool,
    keep_ref: bool,
    rng: Optional[random.Random] = None,
) -> List[List[str]]:
    """Shuffle scenes and the videos inside each scene.

    With ``keep_ref`` the first video of each scene, the reference, stays first.
    """
    rng = rng if rng is not None else random.Random()
    scenes = [list(scene) for scene in origin]
    if shuffle_scene:
        rng.shuffle(scenes)
    if shuffle_video:
        for scene in scenes:
            if keep_ref:
                rest = scene[1:]
                rng.shuffle(rest)
                scene[1:] = rest
            else:
                rng.shuffle(scene)
    return scenes