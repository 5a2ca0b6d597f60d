# src/zendo/core/feedback.py

from __future__ import annotations

import logging

from ..planner.models import FeedbackEvent

logger = logging.getLogger(__name__)


class NullFeedback:
    """Feedback player used when the host has no way to give cues (tests, headless runs)."""

    def play(self, event: FeedbackEvent) -> None:
        return


class LoggingFeedback:
    """
    Feedback player that only records cues in the log.

    Handy while wiring a new front end: every toggle/drop shows up at DEBUG.
    """

    def __init__(self, level: int = logging.DEBUG) -> None:
        self._level = level

    def play(self, event: FeedbackEvent) -> None:
        logger.log(self._level, "feedback cue=%s", FeedbackEvent(event).value)
