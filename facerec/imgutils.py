"""
Small geometry types and image helpers shared by the pipeline stages.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import cv2
import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (float(self.x), float(self.y))


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def offset(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


def to_gray(img: np.ndarray) -> np.ndarray:
    """
    Single-channel 8-bit copy of a BGR, BGRA or gray image.
    """
    if img.ndim == 2:
        gray = img.copy()
    elif img.shape[2] == 1:
        gray = img[:, :, 0].copy()
    elif img.shape[2] == 4:
        gray = cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    else:
        gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)

    if gray.dtype != np.uint8:
        gray = np.clip(gray, 0, 255).astype(np.uint8)
    return gray


def is_empty(img: Optional[np.ndarray]) -> bool:
    return img is None or img.size == 0


def clamp_rect(r: Rect, img_w: int, img_h: int) -> Rect:
    """
    Shift a rect so it lies completely inside the image.
    The size is only reduced when it is larger than the image itself.
    """
    w, h = min(r.width, img_w), min(r.height, img_h)
    x, y = r.x, r.y
    if x < 0:
        x = 0
    if y < 0:
        y = 0
    if x + w > img_w:
        x = img_w - w
    if y + h > img_h:
        y = img_h - h
    return Rect(x, y, w, h)


def crop(img: np.ndarray, r: Rect) -> np.ndarray:
    x1 = max(0, r.x)
    y1 = max(0, r.y)
    x2 = min(img.shape[1], r.x + r.width)
    y2 = min(img.shape[0], r.y + r.height)
    return img[y1:y2, x1:x2]
