"""Recommendation error hierarchy.

All pipeline-level exceptions inherit from RecommendError, which provides:
- message: technical detail (for logs)
- recoverable: whether the caller may reasonably try again

Three failure classes reach callers:
- CollaboratorError: a recaller, filter rule or sorter failed
- NoCandidatesError: an empty result was escalated into a failure
- PersistenceError: the fetch succeeded but recording served items failed
"""


class RecommendError(Exception):
    """Base exception for all recommendation errors."""

    def __init__(self, message, recoverable=True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class CollaboratorError(RecommendError):
    """A recall, filter or sort collaborator raised."""

    def __init__(self, stage, cause):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")


class NoCandidatesError(RecommendError):
    """Nothing left to recommend after the whole pipeline ran."""

    def __init__(self, message="no candidates available"):
        super().__init__(message, recoverable=False)


class PersistenceError(RecommendError):
    """Served-history write failed after a successful fetch.

    ``items`` keeps the valid fetch result so a caller that does not need
    the history can still serve it.
    """

    def __init__(self, items, cause):
        self.items = list(items)
        self.cause = cause
        super().__init__(f"recording {len(self.items)} served items failed: {cause}")
