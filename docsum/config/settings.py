from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"

    ocr_language: str = "eng"
    ocr_tesseract_cmd: str = "tesseract"
    ocr_tessdata_dir: str = ""

    llm_provider: str = "openai"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4.1-mini"
    openai_temperature: float = 0.3
    openai_timeout_seconds: int = 30
    openai_compatible_base_url: str = ""

    summary_max_words: int = 50
    min_report_chars: int = 50
    batch_request_delay_seconds: float = 0.5
