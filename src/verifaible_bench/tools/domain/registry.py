"""ToolRegistry — explicit catalogue of tool schemas and their handlers."""

from collections.abc import Iterable
from dataclasses import dataclass

from verifaible_bench.tools.domain.handler import ToolHandler
from verifaible_bench.tools.domain.schema import ToolSchema


@dataclass(frozen=True)
class ToolEntry:
    schema: ToolSchema
    handler: ToolHandler


class ToolRegistry:
    """Ordered mapping of tool name to (schema, handler).

    Constructed explicitly and passed into each session, so a run can be
    given a subset of tools without touching process-wide state.
    """

    def __init__(self, entries: Iterable[ToolEntry] = ()) -> None:
        self._entries: dict[str, ToolEntry] = {}
        for entry in entries:
            self.register(schema=entry.schema, handler=entry.handler)

    def register(self, schema: ToolSchema, handler: ToolHandler) -> None:
        """Add a tool. Raises ValueError if the name is already registered."""
        if schema.name in self._entries:
            raise ValueError(f"tool '{schema.name}' is already registered")
        self._entries[schema.name] = ToolEntry(schema=schema, handler=handler)

    def schemas(self) -> list[ToolSchema]:
        return [entry.schema for entry in self._entries.values()]

    def names(self) -> list[str]:
        return list(self._entries.keys())

    def handler(self, name: str) -> ToolHandler | None:
        entry = self._entries.get(name)
        return entry.handler if entry is not None else None

    def subset(self, names: Iterable[str]) -> "ToolRegistry":
        """Return a new registry with only the named tools, in registry order.

        Raises:
            KeyError: if any name is not registered.
        """
        wanted = list(names)
        unknown = [name for name in wanted if name not in self._entries]
        if unknown:
            raise KeyError(f"unknown tool(s): {', '.join(unknown)}")
        return ToolRegistry(
            entry for name, entry in self._entries.items() if name in wanted
        )

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
