"""Plugin manifest model - the shape of blitz.config.yaml."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from blitz.constants import DEFAULT_DESCRIPTION


class PluginManifest(BaseModel):
    """Plugin manifest loaded from blitz.config.yaml.

    Strict: values are never coerced, so `version: 1.0` (a YAML float) is
    rejected rather than turned into a string. Unknown keys are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Unique plugin identifier")
    version: str = Field(..., min_length=1, description="Plugin version")
    description: str = Field(default=DEFAULT_DESCRIPTION, description="Plugin description")
    config: Dict[Any, Any] = Field(
        default_factory=dict,
        description="Plugin-specific settings passed to every handler of the plugin",
    )
