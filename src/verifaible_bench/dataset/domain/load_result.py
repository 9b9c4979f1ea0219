"""TestSetLoadResult — the result of loading a test set, including cases and integrity hash."""

from pydantic import BaseModel, Field

from verifaible_bench.dataset.domain.case import TestCase


class TestSetLoadResult(BaseModel, frozen=True):
    """Immutable value object returned by a TestSetLoader.

    Carries the parsed cases, the declared test set version, and the SHA-256
    hex digest of the raw file bytes so callers can record which exact test
    set was used.
    """

    __test__ = False

    cases: list[TestCase]
    version: str
    sha256: str = Field(min_length=1)
