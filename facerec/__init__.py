"""
Face Recognition with Eigenfaces / Fisherfaces and eye-based face preprocessing

This package implements a complete face recognition pipeline:
- Face and eye detection using Haar cascades
- Face alignment from the two eye centres to a square canonical face
- Histogram equalization per face half, blended across the middle
- Bilateral smoothing and an elliptical mask over the background
- Eigenfaces / Fisherfaces training, subspace projection and reconstruction
- Unknown-person rejection from the reconstruction error
"""

from .config import DetectConfig, PreprocessConfig
from .imgutils import Point, Rect
from .preprocess import PreprocessResult, get_preprocessed_face, preprocess_face
from .recognize.types import RecognizerAlgorithm, RecognizerConfig

__version__ = "1.0.0"
