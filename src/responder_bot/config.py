"""Configuration loading and validation."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from responder_bot.core.compiler import BotIdentity


class RobotConfig(BaseModel):
    """Bot identity configuration."""

    name: Annotated[str, Field(min_length=1)] = "bot"
    aka: Annotated[str, Field(min_length=1)] | None = None

    @field_validator("name", "aka")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value


class DispatchConfig(BaseModel):
    """Message dispatch configuration."""

    # Positional groups that did not take part in a match map to None
    # when True, and are left out of the captures when False.
    include_unmatched_groups: bool = True


class ResponderConfig(BaseModel):
    """A responder group to load at startup."""

    path: str  # "package.module:attribute"
    options: dict[str, Any] = Field(default_factory=dict)


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RESPONDER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    robot: RobotConfig = Field(default_factory=RobotConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    responders: list[ResponderConfig] = Field(default_factory=list)


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from YAML file and environment variables.

    Sections set in the YAML file take precedence over environment
    variables (RESPONDER_* prefix), which take precedence over defaults.

    Args:
        config_path: Path to YAML config file. If None, tries ./config.yaml

    Returns:
        Validated configuration object
    """
    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    yaml_config: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}

    # Filter out None values from YAML (e.g., "robot:" with no values parses as None)
    yaml_config = {k: v for k, v in yaml_config.items() if v is not None}

    return Config(**yaml_config)


def identity_from_config(config: Config) -> "BotIdentity":
    """Get the bot identity used to rewrite addressed patterns."""
    from responder_bot.core.compiler import BotIdentity

    return BotIdentity(name=config.robot.name, aka=config.robot.aka)
