"""TestCase domain value object — one benchmark question with its expected answer."""

from pydantic import BaseModel, ConfigDict, Field


class TestCase(BaseModel, frozen=True):
    """Immutable value object representing a single benchmark case.

    ``evidence_type`` is the expected citation type; it may list several
    acceptable values separated by ``|`` (e.g. ``"table|pdf"``). When absent
    the scorer infers it from ``category``.
    """

    __test__ = False  # not a pytest test class despite the name

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    category: str = Field(min_length=1)
    url: str
    question: str = Field(min_length=1)
    answer: str
    evidence_type: str | None = None
