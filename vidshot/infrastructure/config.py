"""
vidshot configuration using Pydantic Settings.
Every section can be overridden through environment variables or a .env file.
"""

from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from vidshot.core.value_objects.sampling_policy import SamplingPolicy, SamplingStrategy

# Load .env before any BaseSettings subclass reads env vars
load_dotenv()


class StorageSettings(BaseSettings):
    media_root: str = "./media"
    staging_dir: str = "staging"
    upload_dir: str = "./media/uploads"
    screenshots_dir: str = "./media/screenshots"

    model_config = {"env_prefix": "STORAGE_"}


class ProbeSettings(BaseSettings):
    timeout: int = 30

    model_config = {"env_prefix": "PROBE_"}


class UploadSettings(BaseSettings):
    backend: str = "local"  # "local" or "http"
    endpoint_url: str = "http://localhost:9000/upload"
    chunk_size: int = 1024 * 1024
    timeout: Optional[float] = None

    model_config = {"env_prefix": "UPLOAD_"}


class SamplingSettings(BaseSettings):
    strategy: SamplingStrategy = SamplingStrategy.FIXED_COUNT
    frame_count: int = 4
    interval_seconds: float = 2.0
    scene_threshold: float = 0.4
    max_frames: int = 50
    jpeg_quality: int = 90

    model_config = {"env_prefix": "SAMPLING_"}


class ProcessingSettings(BaseSettings):
    timeout: Optional[float] = None

    model_config = {"env_prefix": "PROCESSING_"}


class WebSettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_size_mb: int = 2048


class LoggingSettings(BaseSettings):
    level: str = "INFO"

    model_config = {"env_prefix": "LOG_"}


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    app_env: str = "development"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    probe: ProbeSettings = Field(default_factory=ProbeSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    sampling: SamplingSettings = Field(default_factory=SamplingSettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    web: WebSettings = Field(default_factory=WebSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def sampling_policy(self) -> SamplingPolicy:
        """Build the configured frame sampling policy. Raises ValueError on bad values."""
        return SamplingPolicy(
            strategy=self.sampling.strategy,
            frame_count=self.sampling.frame_count,
            interval_seconds=self.sampling.interval_seconds,
            scene_threshold=self.sampling.scene_threshold,
            max_frames=self.sampling.max_frames,
        )

    def validate_startup(self) -> None:
        """Fail fast on settings the container cannot build."""
        if self.upload.backend not in ("local", "http"):
            raise RuntimeError(f"FATAL: unknown upload backend '{self.upload.backend}'")
        self.sampling_policy()


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
