from pydantic_settings import BaseSettings
from typing import Optional, Union
from functools import lru_cache
from pathlib import Path
from pydantic import field_validator

# Project root is one level up from lesson_planner/
PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_ROOT = Path(__file__).parent

__all__ = ["Settings", "settings", "get_settings"]


class Settings(BaseSettings):
    # App Settings
    app_name: str = "Inclusive Lesson Planner"
    debug: Union[bool, str] = False

    @field_validator('debug', mode='before')
    @classmethod
    def parse_debug(cls, v):
        """Parse debug from various formats"""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            v_lower = v.lower().strip()
            if v_lower in ('true', '1', 'yes', 'on'):
                return True
            if v_lower in ('false', '0', 'no', 'off'):
                return False
            return False
        return bool(v)

    # Server Settings
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS Settings - Allowed frontend URLs
    cors_origins: Union[str, list[str]] = ["*"]

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list"""
        if isinstance(v, str):
            if v.strip() == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Environment (development or production)
    environment: str = "development"

    # Session Store - "memory" for local runs, "supabase" for deployments
    session_store_backend: str = "memory"
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    sessions_table: str = "lesson_sessions"

    # Authentication (tokens are issued elsewhere, only verified here)
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_user_claim: str = "userId"

    # LLM - any OpenAI-compatible chat completions endpoint
    llm_api_key: Optional[str] = None
    llm_base_url: str = "https://api.openai.com/v1"
    llm_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 120.0
    llm_max_tokens: int = 4096

    # Per-stage temperatures (lower for extraction, higher for free-form design)
    curriculum_temperature: float = 0.2
    objectives_temperature: float = 0.3
    activity_temperature: float = 0.7
    evaluation_temperature: float = 0.4
    enrichment_temperature: float = 0.3
    reflection_temperature: float = 0.5

    # Web search (Serper). Enrichment falls back to built-in strategies when unset.
    serper_api_key: Optional[str] = None
    serper_url: str = "https://google.serper.dev/search"
    search_timeout_seconds: float = 15.0
    search_stagger_seconds: float = 1.0
    search_results_per_query: int = 5

    # Curriculum retrieval
    curriculum_data_dir: str = str(PACKAGE_ROOT / "data" / "curriculum")
    default_corpus: str = "curriculum.csv"
    embedding_model_name: str = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"
    chunk_size: int = 1000          # characters per window
    chunk_overlap: int = 200        # characters shared between windows
    retrieval_top_k: int = 10
    subject_match_threshold: float = 0.6
    index_build_timeout_seconds: float = 300.0

    # Retry policy for generation sub-steps
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields in .env that aren't defined


@lru_cache()
def get_settings() -> Settings:
    """
    Create and cache a single Settings instance (Singleton pattern).
    Returns the same instance on subsequent calls.
    """
    return Settings()


# Create a global settings instance for convenience
settings = get_settings()
