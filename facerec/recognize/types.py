from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import numpy as np

from ..errors import UnsupportedAlgorithmError


class RecognizerAlgorithm(Enum):
    EIGENFACES = "eigenfaces"  # PCA (Turk and Pentland, 1991)
    FISHERFACES = "fisherfaces"  # LDA (Belhumeur et al, 1997)

    @classmethod
    def parse(cls, value) -> "RecognizerAlgorithm":
        """
        Accepts the enum itself, "eigenfaces", "Fisherfaces" or the
        "FaceRecognizer.Eigenfaces" style names.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key.startswith("facerecognizer."):
                key = key[len("facerecognizer."):]
            for algo in cls:
                if key == algo.value:
                    return algo
        raise UnsupportedAlgorithmError(
            f"The face recognizer algorithm [{value}] is not supported, "
            f"use one of: {', '.join(a.value for a in cls)}"
        )


@dataclass
class RecognizerConfig:
    algorithm: RecognizerAlgorithm = RecognizerAlgorithm.EIGENFACES  # names are parsed on construction
    num_components: int = 0  # 0 = keep every component the data supports
    # Reconstruction error at or above this means "unknown person".
    unknown_threshold: float = 0.7

    def __post_init__(self):
        self.algorithm = RecognizerAlgorithm.parse(self.algorithm)


@dataclass(frozen=True)
class AppearanceModel:
    algorithm: RecognizerAlgorithm
    mean: np.ndarray  # (d,) float64
    eigenvectors: np.ndarray  # (d, k) float64, one basis direction per column
    eigenvalues: np.ndarray  # (k,)
    labels: np.ndarray  # (n,) int
    projections: np.ndarray  # (n, k) training samples in the subspace
    face_size: Tuple[int, int]  # (h, w)

    @property
    def num_components(self) -> int:
        return int(self.eigenvectors.shape[1])

    @property
    def dim(self) -> int:
        return int(self.eigenvectors.shape[0])


@dataclass
class MatchResult:
    label: Optional[int]
    distance: float  # nearest training sample in the subspace
    similarity: float  # reconstruction error, lower is more similar
    accepted: bool
