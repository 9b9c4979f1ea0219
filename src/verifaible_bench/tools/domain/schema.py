"""ToolSchema value object — name, description and JSON-schema parameters of one tool."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolSchema(BaseModel, frozen=True):
    """Provider-neutral description of a callable tool.

    Adapters translate this into their backend's tool declaration shape.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str
    parameters: dict[str, Any]
