"""
Brightness / contrast standardisation of the canonical face.

Light often comes from one side, so equalizing the whole face leaves one half
dark and the other bright. Equalizing each half separately fixes that but adds
a hard seam in the middle, so the inner half of the face blends through the
whole-face equalization:

    |  left  | left->whole | whole->right | right |
    0       W/4           W/2            3W/4     W
"""

from __future__ import annotations
import cv2
import numpy as np


def equalize_left_and_right_halves(face: np.ndarray) -> np.ndarray:
    h, w = face.shape[:2]
    mid_x = w // 2

    whole = cv2.equalizeHist(face)
    left = cv2.equalizeHist(np.ascontiguousarray(face[:, :mid_x]))
    right = cv2.equalizeHist(np.ascontiguousarray(face[:, mid_x:]))

    # Per-column sources, padded to full width so the zones index by x directly.
    left_full = np.zeros((h, w), dtype=np.float32)
    right_full = np.zeros((h, w), dtype=np.float32)
    left_full[:, :mid_x] = left
    right_full[:, mid_x:] = right
    whole_f = whole.astype(np.float32)

    x = np.arange(w, dtype=np.float32)
    q1, q2, q3 = w // 4, w * 2 // 4, w * 3 // 4
    quarter = w * 0.25

    out = np.empty((h, w), dtype=np.float32)
    z1 = x < q1
    z2 = (x >= q1) & (x < q2)
    z3 = (x >= q2) & (x < q3)
    z4 = x >= q3

    out[:, z1] = left_full[:, z1]

    f = (x[z2] - q1) / quarter
    out[:, z2] = (1.0 - f) * left_full[:, z2] + f * whole_f[:, z2]

    f = (x[z3] - q2) / quarter
    out[:, z3] = (1.0 - f) * whole_f[:, z3] + f * right_full[:, z3]

    out[:, z4] = right_full[:, z4]

    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def equalize_face(face: np.ndarray, split: bool = True) -> np.ndarray:
    """
    Histogram-equalize a gray face, either whole or per half (split=True).
    Returns a new image; `face` is left untouched.
    """
    if face.size == 0:
        return face.copy()
    if not split or face.shape[1] < 4:
        return cv2.equalizeHist(face)
    return equalize_left_and_right_halves(face)
