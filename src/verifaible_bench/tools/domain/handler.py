"""ToolHandler Protocol — the callable behind a registered tool."""

from typing import Any, Protocol


class ToolHandler(Protocol):
    """Executes one tool call and renders its outcome as text for the model.

    Raising is allowed; the session converts exceptions into tool-error results.
    """

    async def __call__(self, arguments: dict[str, Any]) -> str: ...
