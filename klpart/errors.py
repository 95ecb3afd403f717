"""Error taxonomy shared by the graph substrate and the partitioning engine.

Every failure of a single ``partition`` call surfaces as one of these
distinguishable kinds. None of them are retried inside the engine.
"""


class PartitionError(Exception):
    """Base class for all partitioning engine failures."""


class StructuralError(PartitionError, ValueError):
    """Raised when graph construction inputs are malformed."""


class ParameterError(PartitionError, ValueError):
    """Raised when num_parts, margin or pass limit are invalid."""


class BalanceViolationError(PartitionError):
    """Raised when refined subset sizes fall outside the allowed range.

    Carries the offending sizes and bounds so a caller can decide whether
    to re-run with a different seed or a wider margin.
    """

    def __init__(
        self,
        message: str,
        sizes: list[int],
        max_allowed: int,
        min_allowed: int | None = None,
    ) -> None:
        super().__init__(message)
        self.sizes = sizes
        self.max_allowed = max_allowed
        self.min_allowed = min_allowed


class GraphFormatError(StructuralError):
    """Raised when a graph text file cannot be parsed.

    ``line`` is the 1-indexed line of the offending input, or None when the
    problem is not tied to a single line (e.g. a truncated file).
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line
