# Application layer: the scheduling engine and its orchestration
from .mastery import MasteryPolicy, MasteryUpdater, apply_review
from .scheduler import IntervalTable, ReviewScheduler, compute_next_due
from .selector import ReviewSelection, ReviewSelector, SelectionPolicy, select_for_review

__all__ = [
    "MasteryPolicy",
    "MasteryUpdater",
    "apply_review",
    "IntervalTable",
    "ReviewScheduler",
    "compute_next_due",
    "ReviewSelection",
    "ReviewSelector",
    "SelectionPolicy",
    "select_for_review",
]
