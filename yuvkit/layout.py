"""Grid placement of several video views inside one render area."""

from __future__ import annotations

import math
from typing import List, Optional, Protocol, Tuple


class LayoutView(Protocol):
    """What the layout needs from a video view."""

    def video_size(self) -> Tuple[int, int]:
        """Natural size of the video, used for its aspect ratio."""

    def displayed_size(self) -> Tuple[int, int]:
        """Size at which the video is currently shown."""

    def set_geometry(self, x: int, y: int, width: int, height: int) -> None:
        """Place the view inside the render area."""

    def on_mouse_press(self, x: int, y: int) -> None: ...

    def on_mouse_move(self, x: int, y: int) -> None: ...

    def on_mouse_release(self, x: int, y: int) -> None: ...


def _fit_aspect(src_width: int, src_height: int, width: int, height: int) -> Tuple[int, int]:
    """Largest size within ``width`` x ``height`` keeping the source aspect ratio."""
    if src_width <= 0 or src_height <= 0:
        return width, height
    if width * src_height > height * src_width:
        width = height * src_width // src_height
    else:
        height = width * src_height // src_width
    return width, height


class Layout:
    """Arranges views in the grid that covers the render area best.

    ``width`` and ``height`` are the size of the render area and may be
    changed at any time; call ``update_geometry`` afterwards.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self._views: List[LayoutView] = []
        self.count_x = 0
        self.count_y = 0
        self.view_width = 0
        self.view_height = 0
        self._active: Optional[LayoutView] = None
        self._active_x = 0
        self._active_y = 0

    def __len__(self) -> int:
        return len(self._views)

    @property
    def views(self) -> Tuple[LayoutView, ...]:
        return tuple(self._views)

    def add_view(self, view: LayoutView) -> None:
        self._views.append(view)
        self._update_grid()

    def remove_view(self, view: LayoutView) -> bool:
        """Remove a view; returns False when it was not in the layout."""
        self._active = None
        removed = view in self._views
        if removed:
            self._views.remove(view)
        self._update_grid()
        self.update_geometry()
        return removed

    def _update_grid(self) -> None:
        count = len(self._views)
        if count == 0:
            return

        max_coverage = 0.0
        for x in range(1, count + 1):
            y = math.ceil(count / x)
            view_width = (self.width + 1) // x
            view_height = (self.height + 1) // y
            area = 0
            for view in self._views:
                src_w, src_h = view.video_size()
                w, h = _fit_aspect(src_w, src_h, view_width, view_height)
                area += w * h
            cell = view_width * view_height
            coverage = area / cell if cell > 0 else 0.0
            if coverage >= max_coverage:
                self.count_x = x
                self.count_y = y
                max_coverage = coverage

    def update_geometry(self) -> None:
        """Recompute the grid and place every view in its cell."""
        if self.count_x == 0 or self.count_y == 0:
            self.view_width = 0
            self.view_height = 0
            return

        self._update_grid()
        self.view_width = (self.width + 1) // self.count_x
        self.view_height = (self.height + 1) // self.count_y

        for i, view in enumerate(self._views):
            x, y = i % self.count_x, i // self.count_x
            view.set_geometry(
                x * self.view_width,
                y * self.view_height,
                self.view_width - 1,
                self.view_height - 1,
            )

    def display_size(self) -> Tuple[int, int]:
        """Size the render area needs to show every view at its current size."""
        self._update_grid()
        max_w = max_h = 0
        for view in self._views:
            w, h = view.displayed_size()
            max_w = max(max_w, w)
            max_h = max(max_h, h)
        return (max_w + 1) * self.count_x - 1, (max_h + 1) * self.count_y - 1

    def view_at(self, x: int, y: int) -> Optional[LayoutView]:
        """The view under a point of the render area, if any."""
        if (
            x <= 0
            or x >= self.width
            or y <= 0
            or y >= self.height
            or self.view_width == 0
            or self.view_height == 0
        ):
            return None
        item = x // self.view_width + (y // self.view_height) * self.count_x
        if item >= len(self._views):
            return None
        return self._views[item]

    def _local(self, x: int, y: int) -> Tuple[int, int]:
        return x - self._active_x * self.view_width, y - self._active_y * self.view_height

    def mouse_press(self, x: int, y: int) -> Optional[LayoutView]:
        """Make the view under the point active and pass it the press."""
        if self.view_width == 0 or self.view_height == 0:
            return None

        self._active_x = x // self.view_width
        self._active_y = y // self.view_height
        pos = self._active_x + self._active_y * self.count_x
        if pos >= len(self._views):
            return None

        self._active = self._views[pos]
        self._active.on_mouse_press(*self._local(x, y))
        return self._active

    def mouse_move(self, x: int, y: int) -> Optional[LayoutView]:
        """Pass a move to the active view, in its own coordinates."""
        if self._active is not None:
            self._active.on_mouse_move(*self._local(x, y))
        return self._active

    def mouse_release(self, x: int, y: int) -> Optional[LayoutView]:
        """Pass a release to the active view, in its own coordinates."""
        if self._active is not None:
            self._active.on_mouse_release(*self._local(x, y))
        return self._active