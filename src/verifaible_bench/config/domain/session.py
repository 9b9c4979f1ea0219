"""Session configuration — limits and sampling for one agent conversation."""

from pydantic import BaseModel, Field, field_validator

from verifaible_bench.tools.domain import names

DEFAULT_SYSTEM_PROMPT = """\
You are the VerifAIble assistant. Your job is to collect verifiable evidence \
from web pages.

When you have finished calling tools you MUST reply with a text answer that \
contains:
1. The concrete value or conclusion that answers the question.
2. A citation marker of the form [@v:ID] for every claim, where ID is the \
user_seq returned by verifaible_cite.
3. A short note on the data source and its date.

Never invent citation IDs. Your final message must be text, never empty.

Workflow: fetch the page with web_fetch first. If the target data is in the \
static content, cite it directly with verifaible_cite. If the page renders \
its data with JavaScript, inspect it once with analyze_page, probe and verify \
action steps with test_action_steps (every call starts a fresh browser \
session, so always send the full action sequence), then cite with the same \
action_steps. For videos, find the video with verifaible_web_search, read it \
with video_transcript and cite with evidence_type="video" and a timestamp.\
"""


class SessionConfig(BaseModel, frozen=True):
    max_rounds: int = Field(default=30, ge=1)
    temperature: float = Field(default=0.3, ge=0.0)
    tool_result_max_chars: int = Field(default=12000, ge=100)
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, min_length=1)
    tools: list[str] | None = None

    @field_validator("tools")
    @classmethod
    def _known_tools(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        unknown = [name for name in value if name not in names.ALL]
        if unknown:
            raise ValueError(f"unknown tool name(s): {', '.join(unknown)}")
        return value
