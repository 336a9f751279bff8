"""End-to-end tests of the preprocessing pipeline with scripted cascades."""

import cv2
import numpy as np
import pytest

from conftest import FakeCascade
from facerec.imgutils import Point, Rect
from facerec.mask import elliptical_mask
from facerec.preprocess import get_preprocessed_face, main, preprocess_face


def _synthetic_face(h=200, w=160):
    face = np.full((h, w), 170, dtype=np.uint8)
    cv2.ellipse(face, (w // 2, h // 2), (w // 2 - 10, h // 2 - 8), 0, 0, 360, 140, -1)
    for (x, y) in ((40, 50), (100, 50)):
        cv2.circle(face, (x, y), 6, 30, -1)  # eye markers
    cv2.line(face, (60, 150), (100, 150), 60, 3)  # mouth
    return face


class TestPreprocessFace:
    def test_known_eye_markers(self):
        face = _synthetic_face()
        out = preprocess_face(face, Point(40, 50), Point(100, 50), 100)

        assert out.shape == (100, 100)
        assert out.dtype == np.uint8
        outside = elliptical_mask(100, 100) == 0
        assert (out[outside] == 128).all()

    def test_eye_rows_are_dark_after_alignment(self):
        face = _synthetic_face()
        out = preprocess_face(face, Point(40, 50), Point(100, 50), 100, split=False)
        # eye markers land near (16, 14) and (84, 14): darker than the cheeks below
        assert out[14, 16] < out[40, 30]
        assert out[14, 84] < out[40, 70]

    def test_whole_and_split_modes_differ_only_in_equalization(self):
        face = _synthetic_face()
        a = preprocess_face(face, Point(40, 50), Point(100, 50), 80, split=True)
        b = preprocess_face(face, Point(40, 50), Point(100, 50), 80, split=False)
        assert a.shape == b.shape == (80, 80)


class TestGetPreprocessedFace:
    def _frame(self):
        frame = np.full((240, 320, 3), 30, dtype=np.uint8)
        frame[20:220, 40:200] = cv2.cvtColor(_synthetic_face(), cv2.COLOR_GRAY2BGR)
        return frame

    def test_full_pipeline(self):
        face_cascade = FakeCascade([(40, 20, 160, 200)])
        eye_cascade = FakeCascade([(12, 18, 20, 20)])

        res = get_preprocessed_face(self._frame(), 100, face_cascade, eye_cascade, None)

        assert res.ok
        assert res.face.shape == (100, 100)
        assert res.face_rect == Rect(40, 20, 160, 200)
        assert res.left_eye == Point(48.0, 80.0)
        assert res.right_eye == Point(108.0, 80.0)
        assert res.searched_left_eye == Rect(26, 52, 48, 56)
        assert res.searched_right_eye == Rect(86, 52, 48, 56)

    def test_gray_and_bgra_frames(self):
        frame = self._frame()
        for img in (cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY), cv2.cvtColor(frame, cv2.COLOR_BGR2BGRA)):
            res = get_preprocessed_face(img, 64, FakeCascade([(40, 20, 160, 200)]), FakeCascade([(12, 18, 20, 20)]))
            assert res.ok and res.face.shape == (64, 64)

    def test_no_face(self):
        eye_cascade = FakeCascade([(12, 18, 20, 20)])
        res = get_preprocessed_face(self._frame(), 100, FakeCascade([]), eye_cascade)
        assert not res.ok
        assert res.face_rect is None
        assert res.left_eye is None and res.searched_left_eye is None
        assert eye_cascade.calls == []

    def test_face_without_eyes(self):
        res = get_preprocessed_face(self._frame(), 100, FakeCascade([(40, 20, 160, 200)]), FakeCascade([]), FakeCascade([]))
        assert not res.ok
        assert res.face is None
        assert res.face_rect == Rect(40, 20, 160, 200)
        assert res.searched_left_eye is not None
        assert res.left_eye is None and res.right_eye is None

    def test_one_eye_missing(self):
        eye1 = FakeCascade([(12, 18, 20, 20)], [])
        res = get_preprocessed_face(self._frame(), 100, FakeCascade([(40, 20, 160, 200)]), eye1, FakeCascade([]))
        assert not res.ok
        assert res.left_eye is not None
        assert res.right_eye is None

    def test_empty_frame(self):
        res = get_preprocessed_face(np.zeros((0, 0, 3), np.uint8), 100, FakeCascade([(0, 0, 5, 5)]), FakeCascade([]))
        assert not res.ok


class TestMain:
    def test_unreadable_image(self, tmp_path):
        assert main([str(tmp_path / "missing.png")]) == 2

    def test_no_face_found(self, tmp_path):
        p = tmp_path / "blank.png"
        cv2.imwrite(str(p), np.full((120, 160, 3), 127, np.uint8))
        assert main([str(p), "--out", str(tmp_path / "out.png")]) == 1
        assert not (tmp_path / "out.png").exists()
