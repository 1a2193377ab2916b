from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	anthropic_api_key: str | None = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
	anthropic_model: str = Field(default="claude-3-opus-20240229", validation_alias="ANTHROPIC_MODEL")
	anthropic_base_url: str = Field(default="https://api.anthropic.com/v1/messages", validation_alias="ANTHROPIC_BASE_URL")
	anthropic_version: str = Field(default="2023-06-01", validation_alias="ANTHROPIC_VERSION")
	# Per-call timeout for the generative API (seconds)
	llm_timeout_seconds: float = Field(default=60.0, validation_alias="LLM_TIMEOUT_SECONDS")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Frontend origins allowed by CORS (JSON list in env)
	cors_origins: List[str] = Field(
		default=[
			"https://www.ieltsmaestroai.com",
			"https://icy-plant-066ddc000.6.azurestaticapps.net",
			"http://localhost:3000",
		],
		validation_alias="CORS_ORIGINS",
	)

	# "production" hides raw exception text from 500 responses
	environment: str = Field(default="development", validation_alias="ENVIRONMENT")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	port: int = Field(default=8080, validation_alias="PORT")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
