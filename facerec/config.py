"""
Tuning constants for face detection and preprocessing (the recognizer's live in
recognize/types.py).

The defaults are the values that work for front-facing faces with the stock
OpenCV Haar cascades (haarcascade_eye.xml / haarcascade_eye_tree_eyeglasses.xml).
They depend on the dataset and cascades, so every stage takes a config object
instead of hard-coding them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


# -------------------------
# Detection
# -------------------------

@dataclass
class DetectConfig:
    scaled_width: int = 320  # frames wider than this are shrunk before detection
    scale_factor: float = 1.1  # must be > 1.0
    min_neighbors: int = 4  # 2 = many good+bad hits, 6 = only good hits, some missed
    min_feature_size: Tuple[int, int] = (20, 20)


# -------------------------
# Preprocessing
# -------------------------

@dataclass
class PreprocessConfig:
    # Eye search windows, as fractions of the face crop.
    # For haarcascade_eye.xml / eyeglasses: finds both eyes in ~40% of faces, misses closed eyes.
    eye_sx: float = 0.16
    eye_sy: float = 0.26
    eye_sw: float = 0.30
    eye_sh: float = 0.28

    # Where the left eye should land in the canonical face (right eye is mirrored).
    desired_left_eye_x: float = 0.16
    desired_left_eye_y: float = 0.14

    # Elliptical mask (centre y, half width, half height) as fractions of the face.
    face_ellipse_cy: float = 0.40
    face_ellipse_w: float = 0.50  # should be at least 0.5
    face_ellipse_h: float = 0.80

    # Bilateral filter
    bilateral_d: int = 0  # 0 = derive the neighbourhood from sigma_space
    bilateral_sigma_color: float = 20.0
    bilateral_sigma_space: float = 2.0

    border_gray: int = 128

    @property
    def desired_right_eye_x(self) -> float:
        return 1.0 - self.desired_left_eye_x
