# backend/vidyagiri/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "Vidyagiri"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Frontend origins allowed by CORS
    cors_origins: list[str] = ["http://localhost:5173", "https://vidyagiri.vercel.app"]

    # Generation provider: "groq", "openai" or "anthropic"
    llm_provider: str = "groq"
    groq_api_key: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    generation_timeout: float | None = None  # None = SDK default

    # Embeddings (always OpenAI)
    embedding_model: str = "text-embedding-3-small"
    embedding_timeout: float | None = None

    # Web search: "serper" or "tavily"
    search_provider: str = "serper"
    serper_api_key: str | None = None
    tavily_api_key: str | None = None
    search_timeout: float | None = None
    search_excluded_domains: list[str] = ["google.com"]

    # Evidence pipeline
    evidence_fanout: int = 4
    max_concurrent_fetches: int = 8
    fetch_timeout: float = 5.0
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    block_private_urls: bool = True
    chunk_size: int = 1000
    chunk_overlap: int = 200
    min_content_length: int = 250
    evidence_top_k: int = 2

    # Learning style used when the caller does not send one
    default_vark_style: str = "visual"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
