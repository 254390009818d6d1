from dataclasses import dataclass, field

from yuvkit.layout import Layout


@dataclass(eq=False)
class FakeView:
    natural: tuple = (160, 120)
    shown: tuple = (160, 120)
    geometry: tuple = None
    events: list = field(default_factory=list)

    def video_size(self):
        return self.natural

    def displayed_size(self):
        return self.shown

    def set_geometry(self, x, y, width, height):
        self.geometry = (x, y, width, height)

    def on_mouse_press(self, x, y):
        self.events.append(("press", x, y))

    def on_mouse_move(self, x, y):
        self.events.append(("move", x, y))

    def on_mouse_release(self, x, y):
        self.events.append(("release", x, y))


def make_layout(width, height, count=2):
    layout = Layout(width, height)
    views = [FakeView() for _ in range(count)]
    for v in views:
        layout.add_view(v)
    layout.update_geometry()
    return layout, views


def test_wide_area_places_views_side_by_side():
    layout, (a, b) = make_layout(640, 240)
    assert a.geometry[1] == b.geometry[1]
    assert b.geometry[0] == a.geometry[0] + a.geometry[2] + 1
    assert layout.count_x * layout.count_y >= len(layout)


def test_tall_area_stacks_views():
    layout, (a, b) = make_layout(240, 640)
    assert a.geometry[0] == b.geometry[0]
    assert b.geometry[1] == a.geometry[1] + a.geometry[3] + 1


def test_geometry_cells_match_view_size():
    layout, views = make_layout(640, 240, count=3)
    for v in views:
        assert v.geometry[2] == layout.view_width - 1
        assert v.geometry[3] == layout.view_height - 1


def test_single_view_display_size_is_its_size():
    layout = Layout(400, 300)
    view = FakeView(shown=(352, 288))
    layout.add_view(view)
    assert layout.display_size() == (352, 288)


def test_display_size_uses_largest_view():
    layout, (a, b) = make_layout(640, 240)
    a.shown = (100, 80)
    b.shown = (120, 60)
    w, h = layout.display_size()
    assert w == (120 + 1) * layout.count_x - 1
    assert h == (80 + 1) * layout.count_y - 1


def test_view_at_finds_view_under_point():
    layout, (a, b) = make_layout(640, 240)
    x = b.geometry[0] + b.geometry[2] // 2
    y = b.geometry[1] + b.geometry[3] // 2
    assert layout.view_at(x, y) is b
    x = a.geometry[0] + a.geometry[2] // 2
    assert layout.view_at(x, y) is a


def test_view_at_outside_area_is_none():
    layout, _ = make_layout(640, 240)
    assert layout.view_at(0, 10) is None
    assert layout.view_at(10, 240) is None
    assert layout.view_at(-5, -5) is None


def test_view_at_empty_cell_is_none():
    layout, views = make_layout(640, 640, count=3)
    if layout.count_x * layout.count_y > 3:
        x = layout.view_width * (3 % layout.count_x) + 1
        y = layout.view_height * (3 // layout.count_x) + 1
        assert layout.view_at(x, y) is None
    else:
        assert layout.count_x * layout.count_y == 3


def test_mouse_events_go_to_active_view_in_local_coordinates():
    layout, (a, b) = make_layout(640, 240)
    gx, gy = b.geometry[0], b.geometry[1]
    assert layout.mouse_press(gx + 5, gy + 7) is b
    layout.mouse_move(gx + 9, gy + 11)
    layout.mouse_release(gx + 2, gy + 3)
    assert b.events == [("press", 5, 7), ("move", 9, 11), ("release", 2, 3)]
    assert a.events == []


def test_mouse_press_without_geometry_does_nothing():
    layout = Layout(640, 480)
    view = FakeView()
    layout.add_view(view)
    assert layout.mouse_press(10, 10) is None
    assert view.events == []


def test_remove_view_clears_active_and_relayouts():
    layout, (a, b) = make_layout(640, 240)
    layout.mouse_press(a.geometry[0] + 1, a.geometry[1] + 1)
    assert layout.remove_view(a) is True
    assert layout.mouse_move(3, 3) is None
    assert a.events == [("press", 1, 1)]
    assert layout.views == (b,)
    assert b.geometry[0] == 0 and b.geometry[1] == 0
    assert layout.remove_view(a) is False