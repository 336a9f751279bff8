"""
Noise smoothing and background removal for the canonical face.
"""

from __future__ import annotations
from typing import Optional
import cv2
import numpy as np

from .config import PreprocessConfig


def elliptical_mask(width: int, height: int, config: Optional[PreprocessConfig] = None) -> np.ndarray:
    """
    255 inside the centred face ellipse, 0 outside.
    """
    cfg = config or PreprocessConfig()
    mask = np.zeros((height, width), dtype=np.uint8)
    center = (width // 2, int(round(height * cfg.face_ellipse_cy)))
    axes = (int(round(width * cfg.face_ellipse_w)), int(round(height * cfg.face_ellipse_h)))
    cv2.ellipse(mask, center, axes, 0, 0, 360, 255, cv2.FILLED)
    return mask


def mask_face(face: np.ndarray, config: Optional[PreprocessConfig] = None) -> np.ndarray:
    """
    Bilateral filter (keeps face contours sharp), then keep only the
    elliptical middle of the face on a neutral gray background.
    """
    cfg = config or PreprocessConfig()
    h, w = face.shape[:2]

    filtered = cv2.bilateralFilter(face, cfg.bilateral_d, cfg.bilateral_sigma_color, cfg.bilateral_sigma_space)
    mask = elliptical_mask(w, h, cfg)

    out = np.full((h, w), cfg.border_gray, dtype=np.uint8)
    inside = mask > 0
    out[inside] = filtered[inside]
    return out
