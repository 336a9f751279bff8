"""Tests for bilateral smoothing + elliptical masking."""

import cv2
import numpy as np
import pytest

from facerec.config import PreprocessConfig
from facerec.mask import elliptical_mask, mask_face


def test_mask_geometry():
    mask = elliptical_mask(100, 100)
    assert mask.shape == (100, 100)
    assert set(np.unique(mask)) <= {0, 255}
    assert mask[40, 50] == 255  # centre (W/2, 0.40 H)
    assert mask[99, 50] == 255  # tall ellipse reaches the chin
    assert mask[0, 0] == 0
    assert mask[99, 0] == 0
    assert mask[99, 99] == 0


@pytest.mark.parametrize("fill", [0, 255, None])
def test_outside_of_ellipse_is_exactly_gray(rng, fill):
    if fill is None:
        face = rng.integers(0, 256, size=(70, 70), dtype=np.uint8)
    else:
        face = np.full((70, 70), fill, dtype=np.uint8)

    out = mask_face(face)
    outside = elliptical_mask(70, 70) == 0

    assert outside.any()
    assert (out[outside] == 128).all()


def test_inside_is_bilateral_filtered(rng):
    face = rng.integers(0, 256, size=(70, 70), dtype=np.uint8)
    out = mask_face(face)
    inside = elliptical_mask(70, 70) > 0
    filtered = cv2.bilateralFilter(face, 0, 20.0, 2.0)
    np.testing.assert_array_equal(out[inside], filtered[inside])


def test_masking_twice_keeps_exterior(rng):
    face = rng.integers(0, 256, size=(50, 50), dtype=np.uint8)
    once = mask_face(face)
    twice = mask_face(once)
    outside = elliptical_mask(50, 50) == 0
    np.testing.assert_array_equal(once[outside], twice[outside])


def test_config_controls_background_and_ellipse():
    cfg = PreprocessConfig(border_gray=0, face_ellipse_w=0.2, face_ellipse_h=0.2)
    face = np.full((100, 100), 200, dtype=np.uint8)
    out = mask_face(face, cfg)
    assert out[40, 50] == 200
    assert out[40, 90] == 0
