"""Raw YUV/RGB video files: format guessing from the file name and frame reading."""

from __future__ import annotations

import math
import os
import re
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from .interface import (
    INVALID_PTS,
    PLANE_COUNT,
    ColorFormat,
    EndOfFileError,
    Format,
    Frame,
    InfoKey,
    SourceInfo,
    YuvKitError,
    fourcc,
)

PLUGIN_NAME = "YUV/RGB Raw Video Files (*.yuv; *.rgb; *.raw)"

RESOLUTION_NAMES = (
    "QQVGA   (160 x 120)",
    "QCIF    (176 x 144)",
    "QVGA    (320 x 240)",
    "CIF     (352 x 288)",
    "VGA     (640 x 480)",
    "480P    (720 x 480)",
    "4CIF    (704 x 576)",
    "576P    (720 x 576)",
    "720P   (1280 x 720)",
    "1080P  (1920 x 1080)",
    "2160P  (3840 x 2160)",
    "4320P  (7680 x 4320)",
    "8640P (15360 x 8640)",
)

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_FPS = 30.0

_NAME_RE = re.compile(r"([0-9a-zA-Z]+) +\(([0-9]+) x ([0-9]+)\)")
_NAMED_SIZES = {
    m.group(1).upper(): (int(m.group(2)), int(m.group(3)))
    for m in (_NAME_RE.search(name) for name in RESOLUTION_NAMES)
    if m
}
_NAMED_RE = re.compile("(" + "|".join(map(re.escape, _NAMED_SIZES)) + ")", re.IGNORECASE)
_SIZE_RE = re.compile(r"([0-9][0-9]+)(X)([0-9][0-9]+)", re.IGNORECASE)
_FPS_RE = re.compile(r"([0-9]+)(\.[0-9]+)?(HZ|FPS)", re.IGNORECASE)
_COLOR_RE = re.compile(
    "I420|IYUV|UYVY|YUY2|YVYU|YUYV|YV12|NV12|IMC2|IMC4|Y800|RGB24|BGR24|RGBX32|XRGB32|"
    "BGRX32|XBGR32|RGBA32|ARGB32|BGRA32|ABGR32|RGB565|BGR565|GRAY8",
    re.IGNORECASE,
)

_NAMED_COLORS = {
    "RGB24": ColorFormat.RGB24,
    "BGR24": ColorFormat.BGR24,
    "RGBX32": ColorFormat.RGBX32,
    "RGBA32": ColorFormat.RGBX32,
    "XRGB32": ColorFormat.XRGB32,
    "ARGB32": ColorFormat.XRGB32,
    "BGRX32": ColorFormat.BGRX32,
    "BGRA32": ColorFormat.BGRX32,
    "XBGR32": ColorFormat.XBGR32,
    "ABGR32": ColorFormat.XBGR32,
    "RGB565": ColorFormat.RGB565,
    "BGR565": ColorFormat.BGR565,
    "GRAY8": ColorFormat.Y800,
}


@dataclass(frozen=True)
class RawFileSpec:
    """Format details guessed from a raw video file name."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    color: ColorFormat = ColorFormat.I420
    fps: float = DEFAULT_FPS
    resolution_known: bool = False


def _color_from_name(name: str) -> ColorFormat:
    name = name.upper()
    if name in _NAMED_COLORS:
        return _NAMED_COLORS[name]
    color = ColorFormat(fourcc(*name[:4]))
    return ColorFormat.I420 if color == ColorFormat.IYUV else color


def parse_path(path: str) -> RawFileSpec:
    """Guess size, frame rate and colour format from a file name.

    The last match of each kind in the name wins. Sizes are read as
    ``WIDTHxHEIGHT`` or, failing that, from names such as ``CIF``.
    """
    width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
    known = False

    for m in _SIZE_RE.finditer(path):
        width, height = int(m.group(1)), int(m.group(3))
        known = True

    if not known:
        for m in _NAMED_RE.finditer(path):
            width, height = _NAMED_SIZES[m.group(1).upper()]
            known = True

    fps = DEFAULT_FPS
    for m in _FPS_RE.finditer(path):
        fps = float(m.group(1) + (m.group(2) or ""))

    color = ColorFormat.I420
    for m in _COLOR_RE.finditer(path):
        color = _color_from_name(m.group(0))

    return RawFileSpec(width, height, color, fps, known)


class RawSource:
    """Reads frames from a headerless raw video file.

    ``on_change`` is called whenever the format or the timing changes.
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None) -> None:
        self.on_change = on_change
        self.fps = DEFAULT_FPS
        self.format = Format()
        self.path = ""
        self.num_frames = 0
        self.duration = 0
        self.resolution_known = False
        self._frame_index = 0
        self._insert_frame0 = 0  # first custom time stamp is not zero: show a blank frame 0
        self._timestamps: List[int] = []
        self._file = None
        self._lock = threading.RLock()

    def __enter__(self) -> "RawSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _frame_size(self) -> int:
        return sum(self.format.plane_size(p) for p in range(PLANE_COUNT))

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def open(self, path) -> "RawSource":
        """Open a file, guessing its format from the name."""
        self.path = os.fspath(path)
        spec = parse_path(self.path)
        self.format = Format(spec.color, spec.width, spec.height)
        self.fps = spec.fps
        self.resolution_known = spec.resolution_known

        frame_size = self._frame_size()
        if frame_size > 0:
            self.num_frames = max(os.path.getsize(self.path) // frame_size, 1)
            self.duration = self.index_to_pts(self.num_frames)

        self.close()
        self._file = open(self.path, "rb")
        self._frame_index = 0
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def info(self) -> SourceInfo:
        with self._lock:
            duration = self._timestamps[-1] if self._timestamps else self.duration
            return SourceInfo(
                format=self.format.copy(),
                max_fps=self.fps,
                num_frames=self.num_frames + self._insert_frame0,
                duration=duration,
                last_pts=self.index_to_pts(max(self.num_frames - 1, 0)),
            )

    def read_frame(self, frame: Frame, seeking_pts: int = INVALID_PTS) -> Frame:
        """Read the next frame, or the frame at ``seeking_pts``, into ``frame``.

        Raises EndOfFileError when the file holds no more data.
        """
        with self._lock:
            if self._file is None:
                raise YuvKitError("source is not open")

            if seeking_pts < INVALID_PTS:
                index = self.pts_to_index(seeking_pts)
                if self.num_frames > 0:
                    index = min(index, self.num_frames - 1)
                self._frame_index = index

            frame.format = self.format.copy()
            frame.allocate()

            if self._frame_index > 0 or not self._insert_frame0:
                position = self._frame_size() * (self._frame_index - self._insert_frame0)
                if self._file.tell() != position:
                    self._file.seek(position)
                for plane in range(PLANE_COUNT):
                    size = self.format.plane_size(plane)
                    if size <= 0:
                        continue
                    data = self._file.read(size)
                    if len(data) != size:
                        raise EndOfFileError(f"frame {self._frame_index} is beyond the end of {self.path}")
                    frame.planes[plane][:] = memoryview(data)

            index = self._frame_index
            is_last = index == self.num_frames - 1
            frame.pts = self.index_to_pts(index)
            frame.frame_number = index
            frame.set_info(InfoKey.IS_LAST_FRAME, is_last)
            frame.set_info(InfoKey.SEEKING_PTS, seeking_pts)
            frame.set_info(InfoKey.NEXT_PTS, INVALID_PTS if is_last else self.index_to_pts(index + 1))
            self._frame_index += 1
            return frame

    def index_to_pts(self, frame_idx: int) -> int:
        """Presentation time in milliseconds of a frame index."""
        frame_idx = min(frame_idx, self.num_frames)
        if self._timestamps:
            return self._timestamps[frame_idx]
        return int(math.floor(1000.0 * frame_idx / self.fps))

    def _index_to_pts_internal(self, frame_idx: int) -> int:
        if self.num_frames > 0:
            frame_idx = min(frame_idx, self.num_frames - 1)
        return int(math.floor(1000.0 * frame_idx / self.fps))

    def pts_to_index(self, pts: int) -> int:
        """Index of the frame shown at ``pts`` milliseconds."""
        frame_idx = 0
        if self._timestamps:
            last = len(self._timestamps) - 1
            for i, ts in enumerate(self._timestamps):
                if i == last:
                    frame_idx = i
                    break
                if ts > pts:
                    frame_idx = max(i - 1, 0)
                    break
        else:
            frame_idx = int(math.ceil(pts * self.fps / 1000.0))

        if self.num_frames > 0:
            frame_idx = min(frame_idx, self.num_frames - 1)
        return frame_idx

    def reinit(self, format: Format, fps: float) -> None:
        """Apply a new format and frame rate to the open file."""
        with self._lock:
            self.format = format.copy()
            self.fps = fps
            frame_size = self._frame_size()
            if frame_size > 0:
                self.num_frames = os.path.getsize(self.path) // frame_size
                self.duration = self.index_to_pts(self.num_frames)
        self._notify()

    def timestamps(self) -> List[int]:
        """Presentation times of all frames."""
        if self._timestamps:
            return self._timestamps[:-1]
        return [self.index_to_pts(i) for i in range(self.num_frames)]

    def set_timestamps(self, timestamps) -> None:
        """Use custom presentation times; the last entry marks the duration.

        The list is cut or extended to one more than the number of frames
        and made non-decreasing. When it does not start at 0, a blank frame
        at time 0 is put in front.
        """
        stamps = [int(t) for t in timestamps]
        self._insert_frame0 = 0

        if stamps:
            del stamps[self.num_frames + 1:]
            for i in range(1, len(stamps)):
                stamps[i] = max(stamps[i], stamps[i - 1])

            last = stamps[-1]
            i = 1
            while len(stamps) < self.num_frames + 1:
                stamps.append(last + self._index_to_pts_internal(i))
                i += 1

            if stamps[0] != 0:
                self._insert_frame0 = 1
                stamps.insert(0, 0)

        self._timestamps = stamps
        self._notify()