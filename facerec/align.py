"""
Geometric face normalisation from the two eye centres.

Rotates, scales and translates the gray face crop so both eyes are horizontal
and land on fixed positions of a square canonical face:
left eye at (0.16, 0.14), right eye at (0.84, 0.14) of the output size.
Pixels not covered by the source are mid-gray, so the border does not add
strong edges that would skew equalization or masking.
"""

from __future__ import annotations
import math
from typing import Optional
import cv2
import numpy as np

from .config import PreprocessConfig
from .imgutils import Point


def eye_alignment_matrix(
    left_eye: Point,
    right_eye: Point,
    desired_face_width: int,
    desired_face_height: Optional[int] = None,
    config: Optional[PreprocessConfig] = None,
) -> np.ndarray:
    """
    2x3 similarity transform mapping the eyes onto their canonical positions.
    """
    cfg = config or PreprocessConfig()
    if desired_face_height is None:
        desired_face_height = desired_face_width

    eyes_center = ((left_eye.x + right_eye.x) * 0.5, (left_eye.y + right_eye.y) * 0.5)
    dx = right_eye.x - left_eye.x
    dy = right_eye.y - left_eye.y
    length = math.sqrt(dx * dx + dy * dy)
    if length <= 0.0:
        raise ValueError(f"Eye centres coincide at ({left_eye.x}, {left_eye.y})")
    angle = math.degrees(math.atan2(dy, dx))

    desired_len = (cfg.desired_right_eye_x - cfg.desired_left_eye_x) * desired_face_width
    scale = desired_len / length

    M = cv2.getRotationMatrix2D(eyes_center, angle, scale)
    # Shift the centre of the eyes to the desired centre between the eyes.
    M[0, 2] += desired_face_width * 0.5 - eyes_center[0]
    M[1, 2] += desired_face_height * cfg.desired_left_eye_y - eyes_center[1]
    return M


def align_face(
    face_gray: np.ndarray,
    left_eye: Point,
    right_eye: Point,
    desired_face_width: int,
    config: Optional[PreprocessConfig] = None,
) -> np.ndarray:
    """
    Returns the desired_face_width x desired_face_width aligned gray face.
    Both eyes must be valid; checking that is the caller's job.
    """
    cfg = config or PreprocessConfig()
    size = int(desired_face_width)
    M = eye_alignment_matrix(left_eye, right_eye, size, size, cfg)
    return cv2.warpAffine(
        face_gray,
        M,
        (size, size),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=cfg.border_gray,
    )
