import pytest

from yuvkit.interface import INVALID_PTS
from yuvkit.render import DEFAULT_RENDER_INTERVAL, Rect, RenderClock, RenderQueue


def test_rect_from_size_round_trip():
    rect = Rect.from_size(10, 20, 100, 50)
    assert (rect.width, rect.height) == (100, 50)
    assert rect.left == 10 and rect.top == 20


def test_rect_scaled_identity_and_double():
    rect = Rect(10, 20, 109, 119)
    assert rect.scaled(1.0, 1.0) == rect
    assert rect.scaled(2.0, 3.0) == Rect(20, 60, 218, 357)


def test_rect_scaled_truncates():
    assert Rect(10, 20, 109, 119).scaled(0.5, 0.5) == Rect(5, 10, 54, 59)


def test_queue_fifo_order():
    q = RenderQueue()
    q.push("a", 0, False)
    q.push("b", 40, False)
    assert q.peek() == (0, False)
    assert q.pop() == ("a", 0, False)
    assert q.pop() == ("b", 40, False)
    assert len(q) == 0


def test_queue_seek_drops_earlier_scenes():
    q = RenderQueue()
    q.push("a", 0, False)
    q.push("b", 40, False)
    q.push("seek", 400, True)
    q.push("c", 440, False)
    assert q.peek() == (400, True)
    assert len(q) == 2
    assert q.pop()[0] == "seek"


def test_queue_empty():
    q = RenderQueue()
    assert q.peek() is None
    with pytest.raises(IndexError):
        q.pop()


def test_clock_defaults():
    clock = RenderClock()
    assert clock.render_interval == DEFAULT_RENDER_INTERVAL
    assert clock.speed_ratio == 1.0
    assert clock.last_pts == INVALID_PTS


def test_clock_invalid_never_due_and_seek_always_due():
    clock = RenderClock()
    assert clock.is_due(INVALID_PTS, False) is False
    assert clock.is_due(5000, True) is True


def test_clock_first_frame_due():
    clock = RenderClock()
    assert clock.is_due(0, False) is True


def test_clock_waits_for_enough_cycles():
    clock = RenderClock()
    clock.record_frame(0, False, 0)
    results = [clock.is_due(1000, False) for _ in range(3)]
    assert results == [False, False, False]
    due = [clock.is_due(1000, False) for _ in range(100)]
    assert due[-1] is True


def test_clock_record_frame_resets_counter():
    clock = RenderClock()
    clock.is_due(10, False)
    clock.is_due(10, False)
    clock.record_frame(10, False, 5)
    assert clock.counter == 0
    assert clock.last_pts == 10


def test_clock_record_cycle_moves_toward_sample():
    clock = RenderClock()
    assert clock.record_cycle(26) == pytest.approx(17.0)


def test_clock_speed_ratio():
    clock = RenderClock()
    clock.record_frame(0, False, 0)
    assert clock.record_frame(40, False, 40) == pytest.approx(1.0)
    faster = clock.record_frame(120, False, 40)
    assert 1.0 < faster < 2.0


def test_clock_speed_ratio_ignores_seeks_and_long_gaps():
    clock = RenderClock()
    clock.record_frame(0, False, 0)
    assert clock.record_frame(5000, False, 40) == 1.0
    assert clock.record_frame(5040, True, 10) == 1.0