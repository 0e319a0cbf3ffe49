from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Courtside"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/courtside"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"

    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama2"

    # Token is optional; the public inference API works without one but is rate limited
    huggingface_api_token: str = ""
    huggingface_model: str = "mistralai/Mistral-7B-Instruct-v0.1"

    # rule_based, claude, ollama or huggingface
    default_strategy: str = "rule_based"
    save_analysis_results: bool = True

    semantic_timeout_seconds: float = 60.0


settings = Settings()


# =============================================================================
# MATCHING LIMITS
# =============================================================================

# Edit-distance similarity above which two player names are fuzzy candidates
SIMILARITY_THRESHOLD = 0.8

# Tokens this short are never used as a last-resort player name
MIN_FALLBACK_TOKEN_LENGTH = 3


# =============================================================================
# SEMANTIC ANALYZER LIMITS
# =============================================================================

# Attempts against the Hugging Face inference API (503 while the model loads)
HUGGINGFACE_MAX_ATTEMPTS = 3

# Seconds multiplied by the attempt number between retries
HUGGINGFACE_BACKOFF_SECONDS = 2.0

# Max tokens requested from any model
SEMANTIC_MAX_TOKENS = 1024


# =============================================================================
# LISTING DEFAULTS
# =============================================================================

DEFAULT_CHALLENGE_LIMIT = 10
DEFAULT_HISTORY_LIMIT = 10
