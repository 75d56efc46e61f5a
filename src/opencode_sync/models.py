from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ModelConfigEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    tools: StrictBool | None = None


class ProviderOptions(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    base_url: str | None = Field(default=None, alias="baseURL")
    headers: dict[str, Any] | None = None


class ProviderConfigEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    npm: str | None = None
    name: str | None = None
    options: ProviderOptions | None = None
    models: dict[str, ModelConfigEntry] | None = None


class ConfigDocument(BaseModel):
    """On-disk opencode config.

    Only the ``provider`` subtree is typed; every other key is kept as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    schema_url: str | None = Field(default=None, alias="$schema")
    provider: dict[str, ProviderConfigEntry | None] | None = None
