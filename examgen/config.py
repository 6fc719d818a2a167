from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):

    api_host: str = Field(default="localhost", description="API host")
    api_port: int = Field(default=3000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")

    # LLM Provider API Keys
    google_api_key: Optional[str] = Field(
        default=None,
        description="Google API key for Gemini",
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")

    # LLM Model Names
    google_model_name: str = Field(default="gemini-1.5-flash", description="Google Gemini model name")
    openai_model_name: str = Field(default="gpt-4o-mini", description="OpenAI model name")
    anthropic_model_name: str = Field(default="claude-3-haiku-20240307", description="Anthropic Claude model name")

    # LLM Question Generation
    preferred_question_provider: str = Field(default="google", description="Preferred LLM provider for questions")
    question_generation_temperature: float = Field(default=0.7, description="LLM temperature for question generation")
    question_generation_max_tokens: int = Field(default=8000, description="Max tokens for question generation")
    llm_timeout_seconds: float = Field(default=60.0, description="Timeout for a single LLM call")
    ai_prompt_content_limit: int = Field(default=8000, description="Characters of source content embedded in the prompt")

    # Uploads
    upload_dir: str = Field(default="./uploads", description="Directory for uploaded documents")
    max_upload_size_mb: int = Field(default=50, description="Maximum size per uploaded file in MB")
    max_files_per_upload: int = Field(default=10, description="Maximum files per multi-document upload")

    # Sessions
    session_ttl_seconds: int = Field(default=3600, description="Session retention window in seconds")
    session_sweep_interval_seconds: int = Field(default=60, description="Interval between expired session sweeps")

    # Extraction and rendering
    extraction_timeout_seconds: float = Field(default=120.0, description="Timeout for text extraction / OCR per file")
    render_timeout_seconds: float = Field(default=60.0, description="Timeout for PDF rendering")
    tesseract_language: str = Field(default="eng", description="Tesseract OCR language")
    pdf_render_dpi: int = Field(default=100, description="DPI used to rasterize the first PDF page")

    allowed_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
        validation_alias=AliasChoices("CORS_ALLOWED_ORIGINS", "ALLOWED_ORIGINS"),
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value):
        if value is None:
            return value
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    class Config:
        env_file = [".env", ".env.local"]  # .env.local takes precedence over .env
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
