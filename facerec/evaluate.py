# facerec/evaluate.py
"""
evaluate.py
Tuning of the unknown-person threshold using preprocessed faces.
Assumptions:
- Faces exist under: data/faces/<name>/*.png (or .jpg)
- Faces are already preprocessed (same square size), e.g. saved from
  facerec.preprocess
Method:
- The last `num_unknown_people` people are never trained on (impostors)
- The other people's faces are split into train / probe samples (genuine)
- Every probe is reconstructed through the model and compared to itself
Outputs:
- Prints summary stats of genuine/impostor reconstruction similarities
- Suggests a threshold based on a target FAR
Run:
python -m facerec.evaluate --faces data/faces --algorithm eigenfaces
"""

from __future__ import annotations
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import cv2
import numpy as np

from .recognize.matcher import get_similarity, reconstruct_face
from .recognize.trainer import learn_collected_faces
from .recognize.types import AppearanceModel

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".pgm")


# -------------------------
# Config
# -------------------------

@dataclass
class EvalConfig:
    faces_dir: Path = Path("data/faces")
    algorithm: str = "eigenfaces"
    num_components: int = 0
    min_imgs_per_person: int = 2
    max_imgs_per_person: int = 80  # cap for speed
    train_fraction: float = 0.5
    num_unknown_people: int = 1
    target_far: float = 0.01  # 1% FAR target
    thresholds: Tuple[float, float, float] = (0.05, 1.50, 0.01)  # start, end, step


# -------------------------
# IO
# -------------------------

def list_people(cfg: EvalConfig) -> List[Path]:
    if not cfg.faces_dir.exists():
        raise FileNotFoundError(f"Faces dir not found: {cfg.faces_dir}")
    return sorted([p for p in cfg.faces_dir.iterdir() if p.is_dir()])


def load_faces_for_person(person_dir: Path, cfg: EvalConfig) -> List[np.ndarray]:
    paths = sorted(p for p in person_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
    faces: List[np.ndarray] = []
    for p in paths[: cfg.max_imgs_per_person]:
        img = cv2.imread(str(p), cv2.IMREAD_GRAYSCALE)
        if img is None:
            logger.warning("cannot read %s, skipped", p)
            continue
        faces.append(img)
    return faces


def load_dataset(cfg: EvalConfig) -> Dict[str, List[np.ndarray]]:
    data: Dict[str, List[np.ndarray]] = {}
    size: Optional[Tuple[int, int]] = None
    for person_dir in list_people(cfg):
        faces = load_faces_for_person(person_dir, cfg)
        if size is None and faces:
            size = faces[0].shape[:2]
        # Faces of another size are not preprocessed crops; skip them.
        faces = [f for f in faces if f.shape[:2] == size]
        if len(faces) >= cfg.min_imgs_per_person:
            data[person_dir.name] = faces
        else:
            logger.info("skipping %s: only %d usable faces", person_dir.name, len(faces))
    return data


# -------------------------
# Eval
# -------------------------

def split_dataset(data: Dict[str, List[np.ndarray]], cfg: EvalConfig):
    """
    Returns (train faces, train labels, genuine probes, impostor probes, names).
    """
    names = sorted(data)
    n_unknown = min(cfg.num_unknown_people, max(0, len(names) - 1))
    known = names[: len(names) - n_unknown]
    unknown = names[len(names) - n_unknown:]

    train_faces: List[np.ndarray] = []
    train_labels: List[int] = []
    genuine: List[np.ndarray] = []
    for label, name in enumerate(known):
        faces = data[name]
        n_train = min(len(faces) - 1, max(1, int(round(len(faces) * cfg.train_fraction))))
        train_faces.extend(faces[:n_train])
        train_labels.extend([label] * n_train)
        genuine.extend(faces[n_train:])

    impostor = [f for name in unknown for f in data[name]]
    return train_faces, train_labels, genuine, impostor, known


def reconstruction_similarities(model: AppearanceModel, faces: List[np.ndarray]) -> np.ndarray:
    return np.array([get_similarity(f, reconstruct_face(model, f)) for f in faces], dtype=np.float64)


def sweep_thresholds(genuine: np.ndarray, impostor: np.ndarray, cfg: EvalConfig):
    t0, t1, step = cfg.thresholds
    thresholds = np.arange(t0, t1 + 1e-9, step, dtype=np.float64)

    # FAR: impostor accepted => sim < thr | FRR: genuine rejected => sim >= thr
    results = []
    for thr in thresholds:
        far = float(np.mean(impostor < thr)) if impostor.size else 0.0
        frr = float(np.mean(genuine >= thr)) if genuine.size else 0.0
        results.append((float(thr), far, frr))
    return results


def suggest_threshold(results, target_far: float) -> Optional[Tuple[float, float, float]]:
    """
    Largest threshold whose FAR stays within the target (lowest FRR).
    """
    ok = [r for r in results if r[1] <= target_far]
    if not ok:
        return None
    return max(ok, key=lambda r: r[0])


def describe(arr: np.ndarray) -> str:
    if arr.size == 0:
        return "n=0"
    return (
        f"n={arr.size} mean={arr.mean():.4f} std={arr.std():.4f} "
        f"p05={np.percentile(arr, 5):.4f} p50={np.percentile(arr, 50):.4f} p95={np.percentile(arr, 95):.4f}"
    )


def evaluate(cfg: EvalConfig):
    data = load_dataset(cfg)
    if len(data) < 2:
        raise ValueError(f"Need at least 2 people with {cfg.min_imgs_per_person}+ faces in {cfg.faces_dir}")

    train_faces, train_labels, genuine_faces, impostor_faces, known = split_dataset(data, cfg)
    model = learn_collected_faces(train_faces, train_labels, cfg.algorithm, cfg.num_components)

    genuine = reconstruction_similarities(model, genuine_faces)
    impostor = reconstruction_similarities(model, impostor_faces)
    results = sweep_thresholds(genuine, impostor, cfg)
    return genuine, impostor, results, known


# -------------------------
# Main
# -------------------------

def main(argv=None) -> int:
    defaults = EvalConfig()
    parser = argparse.ArgumentParser(description="Tune the unknown-person threshold.")
    parser.add_argument("--faces", type=Path, default=defaults.faces_dir)
    parser.add_argument("--algorithm", default=defaults.algorithm)
    parser.add_argument("--components", type=int, default=defaults.num_components)
    parser.add_argument("--unknown", type=int, default=defaults.num_unknown_people)
    parser.add_argument("--far", type=float, default=defaults.target_far)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")
    cfg = EvalConfig(
        faces_dir=args.faces,
        algorithm=args.algorithm,
        num_components=args.components,
        num_unknown_people=args.unknown,
        target_far=args.far,
    )

    genuine, impostor, results, known = evaluate(cfg)
    print(f"known people: {', '.join(known)}")
    print(f"genuine  : {describe(genuine)}")
    print(f"impostor : {describe(impostor)}")

    best = suggest_threshold(results, cfg.target_far)
    if best is None:
        print(f"no threshold reaches FAR <= {cfg.target_far:.3f}")
    else:
        thr, far, frr = best
        print(f"suggested threshold: {thr:.2f} (FAR={far:.3f}, FRR={frr:.3f})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
