from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"
    ocr_language: str = "eng"

    max_text_length: int = 6000
    max_file_size_bytes: int = 10 * 1024 * 1024
    max_concurrent_files: int = 4

    structuring_provider: str = "groq"
    structuring_api_key: str = ""
    structuring_base_url: str = ""
    structuring_model_name: str = "llama-3.3-70b-versatile"
    structuring_temperature: float = 0.1
    structuring_timeout_seconds: int = 30
    structuring_max_retries: int = 3
