"""
Linear subspace projection / reconstruction (same contract as OpenCV's
cv::LDA::subspaceProject / subspaceReconstruct).

W is (d, k): d pixels, k basis directions (one per column).
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from ..errors import ShapeMismatchError


def _as_rows(src: np.ndarray) -> np.ndarray:
    a = np.asarray(src)
    if a.ndim == 1:
        return a.reshape(1, -1)
    if a.ndim > 2:
        return a.reshape(a.shape[0], -1)
    return a


def _mean_row(mean: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if mean is None:
        return None
    m = np.asarray(mean, dtype=np.float64).reshape(-1)
    return m if m.size > 0 else None


def subspace_project(W: np.ndarray, mean: Optional[np.ndarray], src: np.ndarray) -> np.ndarray:
    """
    Y = (X - mean) W, one (1, k) row per input row.
    """
    X = _as_rows(src)
    n, d = X.shape
    if W.shape[0] != d:
        raise ShapeMismatchError(
            f"Wrong shapes for given matrices. Was size(src) = ({n},{d}), size(W) = ({W.shape[0]},{W.shape[1]})."
        )
    m = _mean_row(mean)
    if m is not None and m.size != d:
        raise ShapeMismatchError(f"Wrong mean shape for the given data matrix. Expected {d}, but was {m.size}.")

    X = X.astype(np.float64)
    if m is not None:
        X = X - m
    return X @ W


def subspace_reconstruct(W: np.ndarray, mean: Optional[np.ndarray], src: np.ndarray) -> np.ndarray:
    """
    X = Y W^T + mean, one (1, d) row per projection row.
    """
    Y = _as_rows(src)
    n, k = Y.shape
    if W.shape[1] != k:
        raise ShapeMismatchError(
            f"Wrong shapes for given matrices. Was size(src) = ({n},{k}), size(W) = ({W.shape[0]},{W.shape[1]})."
        )
    m = _mean_row(mean)
    if m is not None and m.size != W.shape[0]:
        raise ShapeMismatchError(
            f"Wrong mean shape for the given eigenvector matrix. Expected {W.shape[0]}, but was {m.size}."
        )

    X = Y.astype(np.float64) @ W.T
    if m is not None:
        X = X + m
    return X
