"""Module: config."""

from pydantic_settings import BaseSettings, SettingsConfigDict


# Centralized runtime configuration loaded from environment variables.
class Settings(BaseSettings):
    # Primary SQLAlchemy connection string for the backend database.
    database_url: str
    # Root logger level applied once at startup.
    log_level: str = "INFO"
    # Frontend origins allowed to call the API with credentials.
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    # Placeholder image stored on pets created without a photo.
    default_pet_image: str = "/images/pet-dog-1.jpg"
    # Frontend page hosting the embedded video-call widget.
    video_call_path: str = "/video-call"
    # Bind address used by the uvicorn entry point.
    host: str = "127.0.0.1"
    port: int = 8000

    # Configure pydantic-settings to also load values from local .env file.
    model_config = SettingsConfigDict(env_file=".env")


# Global settings instance imported by app modules at runtime.
settings = Settings()
