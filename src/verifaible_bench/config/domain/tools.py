"""Evidence service configuration — where the remote tools live."""

from pydantic import BaseModel, Field


class ToolServiceConfig(BaseModel, frozen=True):
    api_base: str = Field(default="https://ai.verifaible.space/api/v1", min_length=1)
    user_id: str = Field(default="9", min_length=1)
    timeout_seconds: float = Field(default=120.0, gt=0)
    # analyze_page and test_action_steps drive a headless browser server-side.
    browser_timeout_seconds: float = Field(default=180.0, gt=0)
    transcript_api_base: str = Field(default="https://api.supadata.ai/v1", min_length=1)
    transcript_api_key: str = ""
