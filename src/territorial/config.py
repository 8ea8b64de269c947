"""Runtime configuration for Territorial."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="TERRITORIAL_", env_file=".env", extra="ignore")

    app_name: str = "territorial"
    log_level: str = "INFO"
    debug_logging: bool = Field(default=False, description="Log every rule evaluation at INFO level.")
    enable_biome_control: bool = True
    enable_coordinate_control: bool = True
    enable_plant_growth_control: bool = True
    enable_animal_breeding_control: bool = True
    cache_size: int = Field(default=1_000, ge=1, description="Maximum number of cached verdicts.")
    rules_path: str = Field(
        default="config/territorial-rules.toml",
        description="Location of the TOML file holding plant growth and animal breeding rules.",
    )


settings = Settings()
