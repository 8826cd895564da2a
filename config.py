from typing import Optional

from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    bot_token: Optional[str] = Field(None, validation_alias=AliasChoices("BOT_TOKEN", "bot_token"))
    db_url: str = Field("sqlite:///products.db", validation_alias=AliasChoices("DB_URL", "db_url"))
    samples_dir: str = Field("public/samples", validation_alias=AliasChoices("SAMPLES_DIR", "samples_dir"))
    log_level: str = Field("INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    # extraction
    palette_k: int = Field(6, validation_alias=AliasChoices("PALETTE_K", "palette_k"))
    max_samples: int = Field(8000, gt=0, validation_alias=AliasChoices("MAX_SAMPLES", "max_samples"))
    max_width: int = Field(200, validation_alias=AliasChoices("MAX_WIDTH", "max_width"))  # downscale before sampling
    # search policy
    default_tolerance: float = Field(20.0, validation_alias=AliasChoices("DEFAULT_TOLERANCE", "default_tolerance"))
    min_score: float = Field(0.3, validation_alias=AliasChoices("MIN_SCORE", "min_score"))  # hits must score strictly above
    max_results: int = Field(48, validation_alias=AliasChoices("MAX_RESULTS", "max_results"))
    candidate_limit: int = Field(400, validation_alias=AliasChoices("CANDIDATE_LIMIT", "candidate_limit"))
