import pytest

from yuvkit.interface import (
    INVALID_PTS,
    ColorFormat,
    Format,
    Frame,
    InfoKey,
    MeasureOperation,
    YuvPlane,
)
from yuvkit.measures import BasicMeasures, compute_mse
from yuvkit.process import MIN_PTS_STEP, FrameScheduler, MeasureItem, PlaybackStatus


class FakeControl:
    def __init__(self):
        self.processed = []
        self.seeks = []
        self.pauses = 0

    def on_frame_processed(self, pts, seeking_pts):
        self.processed.append((pts, seeking_pts))

    def seek(self, pts):
        self.seeks.append(pts)

    def play_pause(self):
        self.pauses += 1


def make_frame(view_id, pts, next_pts=INVALID_PTS, seeking=INVALID_PTS, last=False, value=0):
    frame = Frame(format=Format(ColorFormat.Y800, 4, 2), pts=pts)
    frame.allocate()
    frame.planes[0][:] = value
    frame.set_info(InfoKey.VIEW_ID, view_id)
    frame.set_info(InfoKey.NEXT_PTS, next_pts)
    frame.set_info(InfoKey.SEEKING_PTS, seeking)
    frame.set_info(InfoKey.IS_LAST_FRAME, last)
    return frame


def feed_sequence(scheduler, view_id, pts_list):
    for i, pts in enumerate(pts_list):
        last = i == len(pts_list) - 1
        nxt = INVALID_PTS if last else pts_list[i + 1]
        scheduler.receive_frame(make_frame(view_id, pts, nxt, last=last))


def playing():
    return PlaybackStatus(is_playing=True)


def test_first_pts_is_minimum_of_heads():
    s = FrameScheduler()
    s.receive_frame(make_frame(1, 40))
    s.receive_frame(make_frame(2, 80))
    assert s.first_pts() == 40
    s.clean_frame_queue(2)
    assert s.first_pts() == INVALID_PTS


def test_next_pts_uses_next_of_shown_frame():
    s = FrameScheduler()
    s.receive_frame(make_frame(1, 0, next_pts=40))
    s.receive_frame(make_frame(2, 33, next_pts=66))
    assert s.next_pts(0) == 33
    assert s.next_pts(33) == 40


def test_fast_seek_returns_latest_answer_per_view():
    s = FrameScheduler()
    s.receive_frame(make_frame(1, 0))
    old = make_frame(1, 40, seeking=40)
    new = make_frame(1, 40, seeking=40)
    s.receive_frame(old)
    s.receive_frame(new)
    s.receive_frame(make_frame(2, 40, seeking=40))
    scene, completed = s.fast_seek(40, [1, 2])
    assert completed is True
    assert scene[0] is new
    assert [f.info(InfoKey.VIEW_ID) for f in scene] == [1, 2]


def test_fast_seek_incomplete_when_view_missing():
    s = FrameScheduler()
    s.receive_frame(make_frame(1, 40, seeking=40))
    scene, completed = s.fast_seek(40, [1, 2])
    assert completed is False
    assert len(scene) == 1


def test_process_seeking_reports_scene():
    control = FakeControl()
    s = FrameScheduler(control)
    s.set_sources([1])
    s.receive_frame(make_frame(1, 80, seeking=80))
    scenes = s.process(PlaybackStatus(seeking_pts=80))
    assert len(scenes) == 1
    assert scenes[0].seeking is True and scenes[0].pts == 80
    assert control.processed == [(80, 80)]
    assert s.last_pts == 80


def test_process_plays_through_and_pauses_at_end():
    control = FakeControl()
    ended = []
    s = FrameScheduler(control, on_last_frame=lambda: ended.append(True))
    s.set_sources([1])
    feed_sequence(s, 1, [0, 40, 80])
    scenes = s.process(playing())
    assert [sc.pts for sc in scenes] == [0, 40, 80]
    assert all(not sc.seeking for sc in scenes)
    assert s.is_last_frame is True
    assert ended == [True]
    assert control.pauses == 1
    assert [p for p, _ in control.processed] == [0, 40, 80]


def test_process_loops_to_start():
    control = FakeControl()
    s = FrameScheduler(control, loop=True)
    s.set_sources([1])
    feed_sequence(s, 1, [0, 40])
    s.process(playing())
    assert control.seeks == [0]
    assert control.pauses == 0


def test_process_enforces_minimum_step():
    s = FrameScheduler()
    s.set_sources([1])
    s.receive_frame(make_frame(1, 0, next_pts=5))
    s.receive_frame(make_frame(1, 5, next_pts=100))
    scenes = s.process(playing())
    assert scenes[1].pts == MIN_PTS_STEP


def test_process_selection_seeks_back():
    control = FakeControl()
    s = FrameScheduler(control)
    s.set_sources([1])
    feed_sequence(s, 1, [0, 40, 80])
    s.process(PlaybackStatus(is_playing=True, selection_from=0, selection_to=40))
    assert control.seeks[0] == 0


def test_process_paused_returns_nothing():
    s = FrameScheduler()
    s.set_sources([1])
    feed_sequence(s, 1, [0, 40])
    assert s.process(PlaybackStatus(is_playing=False)) == []


def test_process_waits_for_all_sources():
    s = FrameScheduler()
    s.set_sources([1, 2])
    feed_sequence(s, 1, [0, 40])
    assert s.process(playing()) == []


def test_unknown_views_are_dropped():
    s = FrameScheduler()
    s.set_sources([1])
    feed_sequence(s, 1, [0, 40])
    s.receive_frame(make_frame(7, 0))
    scenes = s.process(playing())
    assert all(f.info(InfoKey.VIEW_ID) == 1 for sc in scenes for f in sc.frames)


def test_measures_are_computed_for_scene():
    s = FrameScheduler()
    s.set_sources([1, 2])
    f1 = make_frame(1, 0, seeking=0, value=10)
    f2 = make_frame(2, 0, seeking=0, value=13)
    s.receive_frame(f1)
    s.receive_frame(f2)
    measure = BasicMeasures()
    item = MeasureItem(measure, 1, 2, MeasureOperation(measure_name="MSE"), view_id=5)
    s.set_measure_requests([item])
    s.process(PlaybackStatus(seeking_pts=0))
    (result,) = s.measure_results()
    expected, _ = compute_mse(f1, f2, 0)
    assert result.op.has_results[YuvPlane.Y] is True
    assert result.op.results[YuvPlane.Y] == pytest.approx(expected)
    assert result.op.results[YuvPlane.COLOR] == pytest.approx(expected)
    assert item.op.has_results == [False] * 4


def test_distortion_map_frame_added_to_scene():
    s = FrameScheduler()
    s.set_sources([1, 2])
    s.receive_frame(make_frame(1, 0, seeking=0, value=10))
    s.receive_frame(make_frame(2, 0, seeking=0, value=20))
    measure = BasicMeasures()
    item = MeasureItem(
        measure, 1, 2, MeasureOperation(measure_name="PSNR"), view_id=9, show_distortion_map=True
    )
    s.set_measure_requests([item])
    (scene,) = s.process(PlaybackStatus(seeking_pts=0))
    extra = [f for f in scene.frames if f.info(InfoKey.VIEW_ID) == 9]
    assert len(extra) == 1
    assert extra[0].format.color == ColorFormat.XRGB32
    assert (extra[0].format.width, extra[0].format.height) == (4, 2)
    assert extra[0].info(InfoKey.IS_LAST_FRAME) is True


def test_measure_results_are_copies():
    s = FrameScheduler()
    item = MeasureItem(BasicMeasures(), 1, 2, MeasureOperation(measure_name="MSE"))
    s.set_measure_requests([item])
    first = s.measure_results()
    first[0].op.results[0] = 123.0
    assert s.measure_results()[0].op.results[0] == 0.0