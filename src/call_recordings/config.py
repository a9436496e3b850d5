"""Environment-driven settings for the recording service."""

import os

from pydantic import BaseModel, computed_field


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection and recordings bucket settings."""

    endpoint: str
    user: str
    password: str
    bucket_name: str = "recordings"
    secure: bool = False


class DatabaseConfig(BaseModel, frozen=True):
    """PostgreSQL connection settings for recording metadata."""

    host: str
    port: str
    user: str
    password: str
    database: str

    @computed_field
    @property
    def url(self) -> str:
        """Returns the full async PostgreSQL connection URL."""
        return (
            f"postgresql+psycopg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class TwilioConfig(BaseModel, frozen=True):
    """Telephony provider credentials used to fetch recording media."""

    account_sid: str
    auth_token: str

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token)


class TranscriptionConfig(BaseModel, frozen=True):
    """Azure OpenAI speech-to-text configuration."""

    endpoint: str
    api_key: str
    model: str = "gpt-4o-transcribe"
    timeout_seconds: float = 60.0


class PipelineConfig(BaseModel, frozen=True):
    """Tuning knobs for the recording pipeline."""

    candidate_languages: tuple[str, ...] = ("et", "en", "ru")
    batch_pacing_seconds: float = 1.0
    queue_size: int = 100
    workers: int = 1
    signed_url_ttl_seconds: int = 3600


class AppConfig(BaseModel, frozen=True):
    """Complete configuration of the recording service."""

    minio: MinioConfig
    database: DatabaseConfig
    twilio: TwilioConfig
    transcription: TranscriptionConfig
    pipeline: PipelineConfig = PipelineConfig()


def _parse_languages(raw: str) -> tuple[str, ...]:
    return tuple(lang.strip() for lang in raw.split(",") if lang.strip())


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            bucket_name=os.getenv("MINIO_BUCKET", "recordings"),
            secure=os.getenv("MINIO_SECURE", "false").lower() == "true",
        ),
        database=DatabaseConfig(
            host=os.getenv("POSTGRES_HOST", "postgres"),
            port=os.getenv("POSTGRES_PORT", "5432"),
            user=os.getenv("POSTGRES_USER", ""),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            database=os.getenv("POSTGRES_DB", "cold_calls"),
        ),
        twilio=TwilioConfig(
            account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
            auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
        ),
        transcription=TranscriptionConfig(
            endpoint=os.getenv("AZURE_OPENAI_ENDPOINT", ""),
            api_key=os.getenv("AZURE_OPENAI_API_KEY", ""),
            model=os.getenv("AZURE_OPENAI_MODEL", "gpt-4o-transcribe"),
            timeout_seconds=float(os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "60")),
        ),
        pipeline=PipelineConfig(
            candidate_languages=_parse_languages(
                os.getenv("TRANSCRIPTION_LANGUAGES", "et,en,ru")
            ),
            batch_pacing_seconds=float(os.getenv("BATCH_PACING_SECONDS", "1.0")),
            queue_size=int(os.getenv("TRANSCRIPTION_QUEUE_SIZE", "100")),
            workers=int(os.getenv("TRANSCRIPTION_WORKERS", "1")),
            signed_url_ttl_seconds=int(os.getenv("SIGNED_URL_TTL_SECONDS", "3600")),
        ),
    )
