"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding
    embedding_model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="HuggingFace sentence-transformer model identifier",
    )
    embedding_device: str = Field(default="cpu", description="Torch device the model is loaded on")

    # Chunking
    max_words_per_chunk: int = 500

    # Progress
    progress_checkpoint: float = Field(
        default=20.0,
        description="Progress value reported once the model is loaded, before the first chunk",
    )

    # Export
    export_dir: str = "."

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
