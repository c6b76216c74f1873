from __future__ import annotations

"""Exception hierarchy shared by the retrieval and synthesis layers."""


class InputError(ValueError):
    """Raised when the caller supplies an unusable query."""
    pass


class ProviderError(RuntimeError):
    """Raised when an embedding or completion provider call fails."""
    pass


class VectorLengthError(ValueError):
    """Raised when two vectors of different length are compared."""
    pass


class QueryTimeoutError(TimeoutError):
    """Raised when a query does not finish within its time budget."""
    pass
