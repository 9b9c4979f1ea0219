"""Canonical conversation — provider-neutral, append-only message log."""

from collections.abc import Iterable, Iterator
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from verifaible_bench.provider.domain.errors import ConversationOrderError


class SystemMessage(BaseModel, frozen=True):
    kind: Literal["system"] = "system"
    text: str


class UserMessage(BaseModel, frozen=True):
    kind: Literal["user"] = "user"
    text: str


class AssistantMessage(BaseModel, frozen=True):
    kind: Literal["assistant"] = "assistant"
    text: str
    reasoning: str | None = None


class ToolCallItem(BaseModel, frozen=True):
    kind: Literal["tool_call"] = "tool_call"
    call_id: str = Field(min_length=1)
    name: str
    arguments_json: str


class ToolResultItem(BaseModel, frozen=True):
    kind: Literal["tool_result"] = "tool_result"
    call_id: str = Field(min_length=1)
    output: str


ConversationItem = Annotated[
    SystemMessage | UserMessage | AssistantMessage | ToolCallItem | ToolResultItem,
    Field(discriminator="kind"),
]


class Conversation:
    """Ordered log of canonical items owned by a single session.

    Items are appended, never edited or reordered. Every ToolCallItem must be
    answered by exactly one ToolResultItem with the same id before the next
    message of any role is appended.
    """

    def __init__(self, items: Iterable[ConversationItem] = ()) -> None:
        self._items: list[ConversationItem] = []
        self._pending: dict[str, str] = {}  # call_id -> tool name
        for item in items:
            self.append(item)

    def append(self, item: ConversationItem) -> None:
        """Append one item, enforcing call/result pairing.

        Raises:
            ConversationOrderError: on a message while calls are unanswered, a
                duplicate pending call id, or a result for an unknown call id.
        """
        if isinstance(item, ToolCallItem):
            if item.call_id in self._pending:
                raise ConversationOrderError(f"duplicate pending call id '{item.call_id}'")
            self._pending[item.call_id] = item.name
        elif isinstance(item, ToolResultItem):
            if self._pending.pop(item.call_id, None) is None:
                raise ConversationOrderError(
                    f"tool result for unknown call id '{item.call_id}'"
                )
        elif self._pending:
            raise ConversationOrderError(
                f"{item.kind} message appended while calls are unanswered:"
                f" {', '.join(self._pending)}"
            )
        self._items.append(item)

    def extend(self, items: Iterable[ConversationItem]) -> None:
        for item in items:
            self.append(item)

    @property
    def items(self) -> tuple[ConversationItem, ...]:
        return tuple(self._items)

    @property
    def pending_call_ids(self) -> list[str]:
        return list(self._pending)

    def __iter__(self) -> Iterator[ConversationItem]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)
