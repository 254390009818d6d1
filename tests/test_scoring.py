import random

import pytest

from yuvkit.scoring import NOT_RATED, ScoreSheet, shuffle_list


def test_unrated_slider_results():
    sheet = ScoreSheet(2)
    assert sheet.slider_results(["a.yuv", "b.yuv"]) == '{"a.yuv":Not_rated,"b.yuv":Not_rated}\n'
    assert sheet.ready() is False


def test_rated_slider_results():
    sheet = ScoreSheet(2)
    sheet.set_slider(0, 30)
    assert sheet.ready() is False
    sheet.set_slider(1, 70)
    assert sheet.ready() is True
    assert sheet.slider_results(["a.yuv", "b.yuv"]) == '{"a.yuv":30,"b.yuv":70}\n'


def test_slider_clamps_to_range():
    sheet = ScoreSheet(1, minimum=0, maximum=100)
    assert sheet.set_slider(0, 500) == 100
    assert sheet.set_slider(0, -5) == 0


def test_slider_same_position_does_not_rate():
    sheet = ScoreSheet(1)
    assert sheet.set_slider(0, 0) is None
    assert sheet.ratings == [None]


def test_reset_clears_ratings():
    sheet = ScoreSheet(2)
    sheet.set_slider(0, 10)
    sheet.set_slider(1, 20)
    sheet.reset()
    assert sheet.ratings == [None, None]
    assert sheet.ready() is False


def test_button_mode():
    sheet = ScoreSheet(3, names=["bad", "ok", "good"], mode="button")
    assert sheet.ready() is False
    assert sheet.select_button(2) == "good"
    assert sheet.ready() is True
    assert sheet.button_results(["x", "y", "z"]) == '{"x":0,"y":0,"z":1}\n'
    sheet.reset()
    assert sheet.selected is None


def test_bad_mode_and_index():
    with pytest.raises(ValueError):
        ScoreSheet(2, mode="dial")
    sheet = ScoreSheet(2)
    with pytest.raises(IndexError):
        sheet.set_slider(5, 1)
    with pytest.raises(IndexError):
        sheet.slider_results(["only-one"])


def test_timestamp_results():
    sheet = ScoreSheet(1)
    assert sheet.add_timestamp_result("40") == f"({NOT_RATED}:40),"
    sheet.set_slider(0, 55)
    sheet.add_timestamp_result("80")
    text = sheet.sscqe_results("clip.yuv")
    assert text == '{"clip.yuv":(Not_rated:40),(55:80),}'
    assert sheet.sscqe_results("clip.yuv") == '{"clip.yuv":}'


def test_tick_interval():
    sheet = ScoreSheet(1, minimum=0, maximum=100, scale=["bad", "poor", "fair", "good", "excellent"])
    assert sheet.tick_interval == 100 // 5


ORIGIN = [["ref1", "a1", "b1", "c1"], ["ref2", "a2", "b2", "c2"], ["ref3", "a3", "b3", "c3"]]


def test_shuffle_nothing_copies():
    result = shuffle_list(ORIGIN, False, False, False, random.Random(1))
    assert result == ORIGIN
    assert result[0] is not ORIGIN[0]


def test_shuffle_scene_keeps_scenes_intact():
    result = shuffle_list(ORIGIN, True, False, False, random.Random(3))
    assert sorted(result) == sorted(ORIGIN)


def test_shuffle_video_keep_ref():
    for seed in range(10):
        result = shuffle_list(ORIGIN, False, True, True, random.Random(seed))
        for original, shuffled in zip(ORIGIN, result):
            assert shuffled[0] == original[0]
            assert sorted(shuffled) == sorted(original)


def test_shuffle_video_is_permutation():
    result = shuffle_list(ORIGIN, True, True, False, random.Random(7))
    assert sorted(sorted(s) for s in result) == sorted(sorted(s) for s in ORIGIN)


def test_shuffle_is_deterministic_with_seed():
    first = shuffle_list(ORIGIN, True, True, False, random.Random(42))
    second = shuffle_list(ORIGIN, True, True, False, random.Random(42))
    assert first == second