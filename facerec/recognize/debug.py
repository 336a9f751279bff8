"""
Images of the model internals (mean face, eigenfaces / fisherfaces) for debugging.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, List, Union
import cv2
import numpy as np

from .types import AppearanceModel

logger = logging.getLogger(__name__)


def image_from_1d_float_mat(row: np.ndarray, height: int) -> np.ndarray:
    """
    Reshape a float row/column into an image and stretch it to 0..255.
    """
    mat = np.asarray(row, dtype=np.float32).reshape(height, -1)
    return cv2.normalize(mat, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_8UC1)


def training_debug_images(model: AppearanceModel, max_components: int = 20) -> Dict[str, np.ndarray]:
    """
    {"mean": gray mean face, "<algo>_<i>": JET colour basis vector, ...}
    """
    h, _ = model.face_size
    out: Dict[str, np.ndarray] = {"mean": image_from_1d_float_mat(model.mean, h)}

    k = min(model.num_components, max_components)
    for i in range(k):
        gray = image_from_1d_float_mat(model.eigenvectors[:, i], h)
        out[f"{model.algorithm.value}_{i}"] = cv2.applyColorMap(gray, cv2.COLORMAP_JET)
    return out


def save_training_debug_data(
    model: AppearanceModel,
    out_dir: Union[str, Path],
    max_components: int = 20,
) -> List[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    for name, img in training_debug_images(model, max_components).items():
        p = out_dir / f"{name}.png"
        cv2.imwrite(str(p), img)
        written.append(p)
    logger.info("wrote %d debug images to %s", len(written), out_dir)
    return written
