"""Exceptions raised by the turn pipeline."""


class TurnAbortedError(Exception):
    """
    A turn was aborted before any task-store mutation happened.

    Raised when the planner or the executor reports failure (or raises).
    The string form is the collaborator's error text so it can be returned
    to the caller unchanged.
    """

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message


class ActionArgumentError(ValueError):
    """An action is missing an argument its store operation requires."""
