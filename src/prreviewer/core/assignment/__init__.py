"""Reviewer assignment: selection policy and the engine that applies it."""
from .engine import AssignmentEngine, DeactivationResult
from .policy import ReviewerSelectionPolicy, seed_shared_random

__all__ = [
    "AssignmentEngine",
    "DeactivationResult",
    "ReviewerSelectionPolicy",
    "seed_shared_random",
]
