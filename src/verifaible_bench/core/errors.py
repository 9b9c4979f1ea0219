"""Base exception class for all verifaible-bench-specific errors."""


class BenchError(Exception):
    """Base class for all verifaible-bench errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
