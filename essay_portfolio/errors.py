# essay_portfolio/errors.py
"""Custom error types for the essay portfolio."""


class PortfolioError(Exception):
    """Base error for portfolio operations."""
    pass


class NotFound(PortfolioError):
    """A referenced college, prompt, essay or value does not exist."""

    def __init__(self, kind: str, entity_id: str, message: str = None):
        super().__init__(message or f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class InvalidState(PortfolioError):
    """Operation is not valid for the current shape of an entity."""

    def __init__(self, message: str, entity_id: str = None):
        super().__init__(message)
        self.entity_id = entity_id


class ValidationError(PortfolioError, ValueError):
    """Caller supplied an unusable value (blank name, negative word limit)."""
    pass


class StoreUnavailable(PortfolioError):
    """The document store call failed."""

    def __init__(self, message: str, operation: str = None):
        super().__init__(message)
        self.operation = operation


class PartialCompletionError(PortfolioError):
    """A multi-step operation failed after at least one write was issued.

    ``result`` is the WorkflowResult describing which steps completed;
    re-running the same top-level operation resumes from there.
    """

    def __init__(self, message: str, result=None, cause: Exception = None):
        super().__init__(message)
        self.result = result
        self.cause = cause

    @property
    def steps_completed(self) -> int:
        return self.result.steps_completed if self.result is not None else 0
