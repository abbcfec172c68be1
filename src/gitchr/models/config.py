"""Configuration models."""

from pathlib import Path
from typing import Optional, Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "chr" / "chr.toml"


class Settings(BaseSettings):
    """Settings for card branch synchronisation.

    Values come from (highest priority first) keyword arguments, environment
    variables prefixed with CHR_ (e.g. CHR_PREFIX), a TOML file and the
    defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHR_",
        case_sensitive=False,
        extra="ignore",
        toml_file=DEFAULT_CONFIG_FILE,
    )

    # Branch naming: <prefix><card><suffix>
    prefix: str = Field("ZUP-", description="Prefix shared by every card branch")
    suffix_prd: str = Field("-prd", description="Suffix of the production branch")
    suffix_hml: str = Field("-hml", description="Suffix of the homologation branch")

    # Output
    color: bool = Field(True, description="Colorize terminal output")
    log_level: str = Field("WARNING", description="Log level for diagnostics on stderr")

    # History queries
    base_branch: str = Field("main", description="Branch both card branches start from")
    remote: Optional[str] = Field(None, description="Remote to fetch (None: origin or the first remote)")
    count: int = Field(5, description="Number of PRD commits to inspect")
    target_history_limit: int = Field(100, description="Number of HML commits to compare against")

    @field_validator("prefix", "suffix_prd", "suffix_hml")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))

    @property
    def config_file(self) -> Path:
        """TOML file these settings were read from (it may not exist)."""
        return Path(self.model_config["toml_file"])

    def card_branch_names(self, card_number: str) -> Tuple[str, str]:
        """Return the (production, homologation) branch names for a card."""
        return (
            f"{self.prefix}{card_number}{self.suffix_prd}",
            f"{self.prefix}{card_number}{self.suffix_hml}",
        )


def load_settings(config_file: Optional[Path] = None, **overrides) -> Settings:
    """Load settings, optionally from a TOML file other than the default one.

    Args:
        config_file: Path to a TOML file; missing files are ignored
        **overrides: Explicit values that win over every other source

    Returns:
        Settings instance
    """
    if config_file is None:
        return Settings(**overrides)

    class FileSettings(Settings):
        model_config = SettingsConfigDict(toml_file=Path(config_file))

    return FileSettings(**overrides)
