# multitrend/utils/errors.py
from __future__ import annotations

from typing import Any


class PipelineError(RuntimeError):
    """
    Base class for every terminal failure of the windowing pipeline.

    `context` carries the diagnostic coordinates (row / date / entity / field)
    and is rendered into the message.
    """

    def __init__(self, message: str, **context: Any):
        self.context = context
        if context:
            detail = ", ".join(f"{k}={v!r}" for k, v in context.items())
            message = f"{message} ({detail})"
        super().__init__(message)


class MalformedRow(PipelineError):
    """A source row is missing a required field or carries a non-numeric value."""


class InsufficientData(PipelineError):
    """Too few dates / entities to form a window, or a degenerate split."""


class EmptyInput(PipelineError):
    """Evaluation called with zero samples."""


class ShapeMismatch(PipelineError):
    """Prediction / label matrix dimensions disagree with the configuration."""


class ReadError(RuntimeError):
    """
    Ingestion failure (missing / unreadable / malformed source file).

    Not a PipelineError: I/O problems stay separate from data problems.
    """
