"""Session Protocol — one bounded agent conversation for a single (model, case)."""

from typing import Protocol

from verifaible_bench.session.domain.result import SessionResult


class Session(Protocol):
    """Drives a conversation from one user prompt to a terminal SessionResult.

    A run never raises for provider or tool failures; those end up in the
    result's status and error fields.
    """

    async def run(self, prompt: str) -> SessionResult: ...
