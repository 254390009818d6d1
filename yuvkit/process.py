"""Scheduling of decoded frames into scenes for display, with quality measures."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .colormap import create_color_map
from .interface import (
    INVALID_PTS,
    Frame,
    InfoKey,
    MeasureInfo,
    MeasureOperation,
    YuvPlane,
)

# Smallest step between two played scenes, in milliseconds.
MIN_PTS_STEP = 15


@dataclass
class PlaybackStatus:
    """Snapshot of the playback state."""

    is_playing: bool = False
    seeking_pts: int = INVALID_PTS
    plane: YuvPlane = YuvPlane.COLOR
    selection_from: int = INVALID_PTS
    selection_to: int = INVALID_PTS
    last_process_pts: int = INVALID_PTS
    last_display_pts: int = INVALID_PTS


@dataclass
class MeasureItem:
    """One measure between two source views, with its operation and results."""

    measure: Any
    source_view_id1: int
    source_view_id2: int
    op: MeasureOperation = field(default_factory=MeasureOperation)
    view_id: int = 0
    show_distortion_map: bool = False
    plugin: Any = None


@dataclass
class Scene:
    """Frames to be shown together at one presentation time."""

    frames: List[Frame]
    pts: int
    seeking: bool


def _copy_item(item: MeasureItem) -> MeasureItem:
    op = replace(item.op, results=list(item.op.results), has_results=list(item.op.has_results))
    return replace(item, op=op)


class FrameScheduler:
    """Collects frames per view and hands out scenes in presentation order.

    ``control`` is notified through ``on_frame_processed(pts, seeking_pts)``,
    ``seek(pts)`` and ``play_pause()``; ``on_last_frame`` is called when
    playback has passed the last frame. With ``loop`` set, playback starts
    over instead of pausing.
    """

    def __init__(
        self,
        control: Any = None,
        loop: bool = False,
        on_last_frame: Optional[Callable[[], None]] = None,
    ) -> None:
        self.control = control
        self.loop = loop
        self.on_last_frame = on_last_frame
        self.last_pts = INVALID_PTS
        self.is_last_frame = False
        self._frames: Dict[int, List[Frame]] = {}
        self._dist_maps: Dict[int, np.ndarray] = {}
        self._source_lock = threading.Lock()
        self._source_ids: List[int] = []
        self._measure_lock = threading.Lock()
        self._measure_requests: List[MeasureItem] = []

    def _queues(self):
        return sorted(self._frames.items())

    def set_sources(self, view_ids: Sequence[int]) -> None:
        with self._source_lock:
            self._source_ids = list(view_ids)

    def receive_frame(self, frame: Frame) -> None:
        view_id = frame.info(InfoKey.VIEW_ID)
        self._frames.setdefault(view_id, []).append(frame)

    def clean_frame_queue(self, view_id: int) -> None:
        if view_id in self._frames:
            self._frames[view_id].clear()

    def _clean_and_check(self, view_ids: Sequence[int]) -> bool:
        for view_id in [v for v in self._frames if v not in view_ids]:
            del self._frames[view_id]
        return all(v in self._frames for v in view_ids)

    def first_pts(self) -> int:
        """Earliest time among the queue heads; INVALID_PTS if a queue is empty."""
        first = INVALID_PTS
        for _, queue in self._queues():
            if not queue:
                return INVALID_PTS
            first = min(first, queue[0].pts)
        return first

    def next_pts(self, current_pts: int) -> int:
        """Earliest time after ``current_pts``; INVALID_PTS if a queue is empty."""
        nxt = INVALID_PTS
        for _, queue in self._queues():
            if not queue:
                return INVALID_PTS
            frame = queue[0]
            pts = frame.pts
            if pts <= current_pts:
                pts = frame.info(InfoKey.NEXT_PTS, INVALID_PTS)
            nxt = min(nxt, pts)
        return nxt

    def fast_seek(self, pts: int, view_ids: Sequence[int]) -> Tuple[List[Frame], bool]:
        """Drop queued frames up to those answering a seek to ``pts``.

        Returns the frames found and whether every view provided one. When a
        view holds several answers, the latest one is used.
        """
        completed = True
        scene: List[Frame] = []
        for _, queue in self._queues():
            found = False
            while queue:
                if queue[0].info(InfoKey.SEEKING_PTS) != pts:
                    queue.pop(0)
                    continue
                j = len(queue) - 1
                while j >= 0:
                    if queue[j].info(InfoKey.SEEKING_PTS) == pts:
                        found = True
                        scene.append(queue[j])
                        break
                    j -= 1
                del queue[: max(j, 0)]
                break
            if not found:
                completed = False

        if any(v not in self._frames for v in view_ids):
            completed = False
        return scene, completed

    def _frame_processed(self, pts: int, seeking_pts: int) -> None:
        if self.control is not None:
            self.control.on_frame_processed(pts, seeking_pts)

    def _seek(self, pts: int) -> None:
        if self.control is not None:
            self.control.seek(pts)

    @staticmethod
    def _is_last_scene(scene: Sequence[Frame]) -> bool:
        return all(frame.info(InfoKey.IS_LAST_FRAME, False) for frame in scene)

    def process(self, status: PlaybackStatus) -> List[Scene]:
        """Build the scenes that are ready for the given playback state."""
        with self._source_lock:
            view_ids = list(self._source_ids)

        completed = self._clean_and_check(view_ids)

        if status.seeking_pts != INVALID_PTS:
            scene, all_found = self.fast_seek(status.seeking_pts, view_ids)
            if all_found:
                self.last_pts = status.seeking_pts
                self._frame_processed(status.seeking_pts, status.seeking_pts)
                self._process_measures(scene, status.plane)
                self.is_last_frame = self._is_last_scene(scene)
            return [Scene(scene, status.seeking_pts, True)]

        if not status.is_playing or not completed:
            return []

        scenes: List[Scene] = []
        while True:
            if self.last_pts == INVALID_PTS:
                pts_next = self.first_pts()
                if pts_next == INVALID_PTS:
                    return scenes
            else:
                pts_next = self.next_pts(self.last_pts)
                if pts_next == INVALID_PTS:
                    if self.is_last_frame:
                        self._reached_end(status)
                    return scenes
                if self.last_pts <= pts_next < self.last_pts + MIN_PTS_STEP:
                    pts_next = self.last_pts + MIN_PTS_STEP

            scene: List[Frame] = []
            for _, queue in self._queues():
                while queue and queue[0].info(InfoKey.NEXT_PTS, INVALID_PTS) <= pts_next:
                    queue.pop(0)
                if not queue:
                    return scenes  # some frames are still missing
                scene.append(queue[0])

            if not scene:
                return scenes

            self._frame_processed(pts_next, INVALID_PTS)
            self._process_measures(scene, status.plane)
            scenes.append(Scene(scene, pts_next, False))
            self.last_pts = pts_next
            self.is_last_frame = self._is_last_scene(scene)

            if status.selection_from != INVALID_PTS and pts_next >= status.selection_to:
                self._seek(status.selection_from)

    def _reached_end(self, status: PlaybackStatus) -> None:
        if self.on_last_frame is not None:
            self.on_last_frame()
        if self.loop:
            start = status.selection_from if status.selection_from != INVALID_PTS else 0
            self._seek(start)
        elif self.control is not None:
            self.control.play_pause()

    def set_measure_requests(self, requests: Sequence[MeasureItem]) -> None:
        with self._measure_lock:
            self._measure_requests = [_copy_item(item) for item in requests]

    def measure_results(self) -> List[MeasureItem]:
        """Copies of the measure requests holding their latest results."""
        with self._measure_lock:
            return [_copy_item(item) for item in self._measure_requests]

    def _process_measures(self, scene: List[Frame], plane: YuvPlane) -> None:
        with self._measure_lock:
            group: List[MeasureItem] = []
            key = None
            for item in self._measure_requests:
                item_key = (id(item.plugin), id(item.measure), item.source_view_id1, item.source_view_id2)
                if item_key != key:
                    self._process_group(scene, plane, group)
                    group = []
                    key = item_key

                item.op.clear_results()
                if item.show_distortion_map:
                    item.op.dist_map = self._dist_maps.setdefault(
                        item.view_id, np.zeros(0, dtype=np.float32)
                    )
                group.append(item)
            self._process_group(scene, plane, group)

    @staticmethod
    def _find_frame(scene: Sequence[Frame], view_id: int) -> Optional[Frame]:
        return next((f for f in scene if f.info(InfoKey.VIEW_ID) == view_id), None)

    @staticmethod
    def _measure_info(measure: Any, name: str) -> MeasureInfo:
        for info in measure.capabilities().measures:
            if info.name == name:
                return info
        return MeasureInfo(name=name)

    def _process_group(self, scene: List[Frame], plane: YuvPlane, group: List[MeasureItem]) -> None:
        if not group:
            return
        first = group[0]
        f1 = self._find_frame(scene, first.source_view_id1)
        f2 = self._find_frame(scene, first.source_view_id2)
        if f1 is None or f2 is None:
            return

        measure = first.measure
        p = plane
        if p == YuvPlane.COLOR and not measure.capabilities().has_color_distortion_map:
            p = YuvPlane.Y
        measure.process(f1, f2, p, [item.op for item in group])

        for item in group:
            op = item.op
            if item.show_distortion_map and op.dist_map is not None:
                self._dist_maps[item.view_id] = op.dist_map
            if op.dist_map_width and op.dist_map_height and op.dist_map is not None:
                info = self._measure_info(measure, op.measure_name)
                frame = Frame()
                create_color_map(
                    frame,
                    op.dist_map,
                    op.dist_map_width,
                    op.dist_map_height,
                    info.upper_range,
                    info.lower_range,
                    info.bigger_value_is_better,
                )
                frame.set_info(InfoKey.VIEW_ID, item.view_id)
                frame.set_info(InfoKey.IS_LAST_FRAME, True)
                scene.append(frame)