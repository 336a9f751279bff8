"""
Face preprocessing for recognition:
frame -> largest face (cascade) -> gray crop -> both eyes
-> rotate/scale/translate so the eyes sit on fixed positions
-> histogram equalization (whole face, or left/right halves blended)
-> bilateral smoothing -> elliptical mask on a gray background.

The result is a square gray face that can be fed to the recognizer, or None when
the face or either eye was not found (normal for profile views, blinks, ...).

Run:
python -m facerec.preprocess photo.jpg --width 70 --out face.png
"""

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional
import cv2
import numpy as np

from .align import align_face
from .config import DetectConfig, PreprocessConfig
from .detect import detect_largest_object, load_default_cascades
from .eyes import detect_both_eyes
from .illumination import equalize_face
from .imgutils import Point, Rect, crop, is_empty, to_gray
from .mask import mask_face

logger = logging.getLogger(__name__)


# -------------------------
# Data
# -------------------------

@dataclass
class PreprocessResult:
    face: Optional[np.ndarray] = None  # (W, W) uint8
    face_rect: Optional[Rect] = None  # frame coordinates
    left_eye: Optional[Point] = None  # face-crop coordinates
    right_eye: Optional[Point] = None
    searched_left_eye: Optional[Rect] = None  # face-crop coordinates
    searched_right_eye: Optional[Rect] = None

    @property
    def ok(self) -> bool:
        return self.face is not None


# -------------------------
# Pipeline
# -------------------------

def preprocess_face(
    face_gray: np.ndarray,
    left_eye: Point,
    right_eye: Point,
    desired_face_width: int,
    split: bool = True,
    config: Optional[PreprocessConfig] = None,
) -> np.ndarray:
    """
    Align, equalize and mask a gray face crop whose eye centres are known.
    """
    cfg = config or PreprocessConfig()
    warped = align_face(face_gray, left_eye, right_eye, desired_face_width, cfg)
    equalized = equalize_face(warped, split=split)
    return mask_face(equalized, cfg)


def get_preprocessed_face(
    frame: np.ndarray,
    desired_face_width: int,
    face_cascade: Any,
    eye_cascade1: Any,
    eye_cascade2: Any = None,
    split: bool = True,
    config: Optional[PreprocessConfig] = None,
    detect_config: Optional[DetectConfig] = None,
) -> PreprocessResult:
    """
    Full pipeline on a camera frame (BGR, BGRA or gray).
    """
    cfg = config or PreprocessConfig()
    res = PreprocessResult()
    if is_empty(frame):
        return res

    face_rect = detect_largest_object(frame, face_cascade, config=detect_config)
    if face_rect is None:
        logger.debug("no face")
        return res
    res.face_rect = face_rect

    gray = to_gray(crop(frame, face_rect))

    # Eyes are searched at full resolution.
    eyes = detect_both_eyes(gray, eye_cascade1, eye_cascade2, cfg, detect_config)
    res.left_eye = eyes.left_eye
    res.right_eye = eyes.right_eye
    res.searched_left_eye = eyes.searched_left
    res.searched_right_eye = eyes.searched_right

    if not eyes.both_found:
        logger.debug("face at %s but eyes missing (left=%s right=%s)", face_rect.as_tuple(), eyes.left_eye, eyes.right_eye)
        return res

    res.face = preprocess_face(gray, eyes.left_eye, eyes.right_eye, desired_face_width, split, cfg)
    return res


# -------------------------
# Demo
# -------------------------

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Preprocess the largest face of an image for recognition.")
    parser.add_argument("image")
    parser.add_argument("--width", type=int, default=70, help="canonical face size in pixels")
    parser.add_argument("--whole", action="store_true", help="equalize the whole face instead of each half")
    parser.add_argument("--out", default="face_preprocessed.png")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="[%(name)s] %(message)s")

    frame = cv2.imread(args.image)
    if frame is None:
        print(f"[preprocess] cannot read image: {args.image}")
        return 2

    cascades = load_default_cascades()
    res = get_preprocessed_face(
        frame,
        args.width,
        cascades.face,
        cascades.eye1,
        cascades.eye2,
        split=not args.whole,
    )
    if not res.ok:
        what = "face" if res.face_rect is None else "both eyes"
        print(f"[preprocess] could not find {what} in {args.image}")
        return 1

    cv2.imwrite(args.out, res.face)
    print(f"[preprocess] face {res.face_rect.as_tuple()} -> {args.out} ({args.width}x{args.width})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
