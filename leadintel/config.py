from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Anthropic
    anthropic_api_key: str = ""
    llm_model: str = "claude-sonnet-4-5-20250929"
    synthesis_max_tokens: int = 2000
    message_max_tokens: int = 1024

    # Batch synthesis
    synthesis_max_concurrent: int = 3
    synthesis_batch_delay: float = 0.5  # seconds between chunks

    # Outreach thresholds (outreach score, 1-10)
    outreach_ready_min_score: int = 6
    hot_lead_min_score: int = 8

    # Who the outreach is written for
    sender_company: str = "RLTX.ai"

    # Database
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'data' / 'leadintel.db'}"

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    log_level: str = "INFO"

    @property
    def sqlite_path(self) -> Path | None:
        """Filesystem path of the SQLite database, if the URL points at one."""
        if not self.database_url.startswith("sqlite:///") or ":memory:" in self.database_url:
            return None
        return Path(self.database_url.replace("sqlite:///", ""))


settings = Settings()
