# src/zendo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..planner.controller import PlannerController
from .ports import FeedbackPlayer, ListRepo, TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    backend: str
    task_store: TaskRepo
    list_store: ListRepo
    feedback: FeedbackPlayer
    planner: PlannerController
