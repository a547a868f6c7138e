from .holdout import initial_split
from .strata import make_strata
from .types import FoldAssignment, HoldoutSplit, Split
from .vfold import make_folds, vfold_cv

__all__ = [
    "FoldAssignment",
    "HoldoutSplit",
    "Split",
    "initial_split",
    "make_folds",
    "make_strata",
    "vfold_cv",
]
