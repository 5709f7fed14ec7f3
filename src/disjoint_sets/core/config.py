"""Configuration management for disjoint-sets."""

from pathlib import Path
import json

from pydantic import BaseModel, Field, field_validator

from disjoint_sets.core.combine import COMBINER_NAMES


class GroupingConfig(BaseModel):
    """Configuration for building classes from tabular input."""

    key_column: str = Field(default="key", description="Items column holding keys")
    value_column: str = Field(default="value", description="Items column holding values")
    left_column: str = Field(default="key_1", description="Pairs column for the first key")
    right_column: str = Field(default="key_2", description="Pairs column for the second key")
    combine: str = Field(default="sum", description="Name of the combine function")
    strict: bool = Field(
        default=False, description="Discard all classes if a combine function fails"
    )

    @field_validator("combine")
    @classmethod
    def _known_combiner(cls, value: str) -> str:
        if value not in COMBINER_NAMES:
            raise ValueError(f"combine must be one of {', '.join(COMBINER_NAMES)}")
        return value


class OutputConfig(BaseModel):
    """Configuration for presenting classes."""

    show_members: bool = Field(default=True, description="List member keys of each class")
    max_members: int = Field(default=10, ge=1, description="Members shown per table row")
    member_separator: str = Field(default=";", description="Separator for members in CSV")


class Config(BaseModel):
    """Main configuration for disjoint-sets tool."""

    grouping: GroupingConfig = Field(default_factory=GroupingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            data = json.load(f)

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.model_dump(), f, indent=2, default=str)

    @classmethod
    def get_default(cls) -> "Config":
        """Get default configuration."""
        return cls()


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file or return default.

    Args:
        config_path: Path to configuration file. If None, searches the default
            locations and falls back to the default config.

    Returns:
        Config object
    """
    if config_path is None:
        default_locations = [
            Path.home() / ".config" / "disjoint-sets" / "config.json",
            Path.cwd() / "disjoint-sets.json",
        ]

        for location in default_locations:
            if location.exists():
                return Config.load_from_file(location)

        return Config.get_default()

    return Config.load_from_file(config_path)
