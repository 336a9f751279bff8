"""Tests for eye search windows and the two-cascade eye locator."""

import numpy as np

from conftest import FakeCascade
from facerec.config import PreprocessConfig
from facerec.eyes import detect_both_eyes, eye_search_windows
from facerec.imgutils import Point, Rect


def test_search_windows_100():
    left, right = eye_search_windows(100, 100)
    assert left == Rect(16, 26, 30, 28)
    assert right == Rect(54, 26, 30, 28)


def test_search_windows_mirror_each_other():
    w, h = 160, 200
    left, right = eye_search_windows(w, h)
    assert left == Rect(26, 52, 48, 56)
    assert right.x == 86
    assert (left.y, left.width, left.height) == (right.y, right.width, right.height)


def test_search_windows_follow_config():
    cfg = PreprocessConfig(eye_sx=0.10, eye_sy=0.19, eye_sw=0.40, eye_sh=0.36)
    left, right = eye_search_windows(100, 100, cfg)
    assert left == Rect(10, 19, 40, 36)
    assert right.x == 50


class TestDetectBothEyes:
    def test_both_found_with_primary(self):
        face = np.full((100, 100), 90, dtype=np.uint8)
        eye1 = FakeCascade([(5, 6, 10, 8)])
        eye2 = FakeCascade([(0, 0, 4, 4)])

        res = detect_both_eyes(face, eye1, eye2)

        assert res.both_found
        assert res.left_rect == Rect(21, 32, 10, 8)
        assert res.right_rect == Rect(59, 32, 10, 8)
        assert res.left_eye == Point(26.0, 36.0)
        assert res.right_eye == Point(64.0, 36.0)
        assert res.searched_left == Rect(16, 26, 30, 28)
        assert res.searched_right == Rect(54, 26, 30, 28)
        assert eye2.calls == []

    def test_windows_are_searched_at_full_resolution(self):
        face = np.full((100, 100), 90, dtype=np.uint8)
        eye1 = FakeCascade([(5, 6, 10, 8)])
        detect_both_eyes(face, eye1)
        shapes = [img.shape for img, _ in eye1.calls]
        assert shapes == [(28, 30), (28, 30)]

    def test_fallback_cascade_used_on_same_window(self):
        face = np.full((100, 100), 90, dtype=np.uint8)
        eye1 = FakeCascade([])
        eye2 = FakeCascade([(2, 3, 6, 6)])

        res = detect_both_eyes(face, eye1, eye2)

        assert res.left_eye == Point(16 + 2 + 3.0, 26 + 3 + 3.0)
        assert res.right_eye == Point(54 + 2 + 3.0, 26 + 3 + 3.0)
        assert len(eye1.calls) == 2
        assert len(eye2.calls) == 2
        assert eye2.calls[0][0].shape == (28, 30)

    def test_sides_are_independent(self):
        face = np.full((100, 100), 90, dtype=np.uint8)
        eye1 = FakeCascade([])
        eye2 = FakeCascade([(2, 3, 6, 6)], [])  # left hit, right miss

        res = detect_both_eyes(face, eye1, eye2)

        assert res.left_eye is not None
        assert res.right_eye is None
        assert res.right_rect is None
        assert not res.both_found

    def test_no_fallback_cascade(self):
        face = np.full((100, 100), 90, dtype=np.uint8)
        res = detect_both_eyes(face, FakeCascade([]), None)
        assert res.left_eye is None and res.right_eye is None
        assert res.searched_left is not None

    def test_empty_face_crop(self):
        eye1 = FakeCascade([(1, 1, 2, 2)])
        res = detect_both_eyes(np.zeros((0, 0), dtype=np.uint8), eye1, eye1)
        assert res.left_eye is None and res.right_eye is None
        assert eye1.calls == []

    def test_zero_height_face_crop(self):
        eye1 = FakeCascade([(1, 1, 2, 2)])
        res = detect_both_eyes(np.zeros((0, 50), dtype=np.uint8), eye1)
        assert not res.both_found
