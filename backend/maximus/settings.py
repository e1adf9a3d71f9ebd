from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash-lite", validation_alias="GEMINI_MODEL")
	# Optional: model override for kindness scenario generation
	gemini_model_scenarios: str | None = Field(default=None, validation_alias="GEMINI_MODEL_SCENARIOS")
	gemini_timeout_seconds: float = Field(default=30.0, validation_alias="GEMINI_TIMEOUT_SECONDS")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="MAXIMUS", validation_alias="OPENROUTER_TITLE")

	# Progression
	tier_size: int = Field(default=100, gt=0, validation_alias="MAXIMUS_TIER_SIZE")

	# Timers (seconds)
	draw_tick_seconds: float = Field(default=10.0, gt=0, validation_alias="MAXIMUS_DRAW_TICK_SECONDS")
	reading_tick_seconds: float = Field(default=1.0, gt=0, validation_alias="MAXIMUS_READING_TICK_SECONDS")

	# Drawing surface size in pixels
	canvas_width: int = Field(default=300, ge=50, validation_alias="MAXIMUS_CANVAS_WIDTH")
	canvas_height: int = Field(default=200, ge=50, validation_alias="MAXIMUS_CANVAS_HEIGHT")

	# Learner sessions with no requests for this long are closed by the sweeper
	session_idle_seconds: float = Field(default=1800.0, gt=0, validation_alias="MAXIMUS_SESSION_IDLE_SECONDS")
	session_sweep_seconds: float = Field(default=60.0, gt=0, validation_alias="MAXIMUS_SESSION_SWEEP_SECONDS")

	log_level: str = Field(default="INFO", validation_alias="MAXIMUS_LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
