from .matcher import (
    UNRANKABLE_SIMILARITY,
    get_similarity,
    has_subspace,
    predict,
    project,
    recognize,
    reconstruct,
    reconstruct_face,
)
from .subspace import subspace_project, subspace_reconstruct
from .trainer import learn_collected_faces, train
from .types import AppearanceModel, MatchResult, RecognizerAlgorithm, RecognizerConfig
