from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    output_root: str = "output"
    public_base_url: str = "http://localhost:3000/files"

    pdf_engine: str = "pymupdf"
    render_dpi: int = 150

    asset_extraction_timeout_seconds: float = 60.0
    asset_scan_batch_size: int = 10
    max_page_workers: int = 3

    annotation_provider: str = "google"
    google_application_credentials: str = ""
    annotation_concurrency: int = 5

    ocr_language: str = "eng"

    summarization_provider: str = "mistral"
    summarization_api_key: str = ""
    summarization_model_name: str = "open-mistral-7b"
    summarization_base_url: str = ""
    summarization_timeout_seconds: int = 30
    summarization_temperature: float = 0.2
    summary_max_attempts: int = 3
    summary_retry_base_delay_seconds: float = 1.0
