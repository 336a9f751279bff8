import cv2
import numpy as np
import pytest


class FakeCascade:
    """Stands in for cv2.CascadeClassifier: returns scripted detections."""

    def __init__(self, *responses):
        # one response per call; the last one repeats
        self.responses = list(responses) or [[]]
        self.calls = []

    def detectMultiScale(self, img, **kwargs):
        self.calls.append((img.copy(), kwargs))
        i = min(len(self.calls) - 1, len(self.responses) - 1)
        rects = self.responses[i]
        if not rects:
            return ()
        return np.array(rects, dtype=np.int32).reshape(-1, 4)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def make_person(rng, size=(20, 20)):
    """Smooth random pattern standing in for one person's face."""
    h, w = size
    coarse = rng.integers(30, 226, size=(4, 4)).astype(np.float32)
    return cv2.resize(coarse, (w, h), interpolation=cv2.INTER_CUBIC).clip(0, 255).astype(np.uint8)


def noisy(base, rng, sigma=3.0):
    n = rng.normal(0.0, sigma, size=base.shape)
    return np.clip(base.astype(np.float64) + n, 0, 255).astype(np.uint8)
