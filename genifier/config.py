from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend command surface (document store, graph construction, model files)
    BACKEND_URL: str = "http://127.0.0.1:1420"
    BACKEND_TIMEOUT_SECONDS: float = 30.0

    # Local OpenAI-compatible model server (llama.cpp)
    LLM_URL: str = "http://localhost:8080"
    LLM_MODEL: str = "ggml-model-Q4_K_M"
    LLM_TIMEOUT_SECONDS: float = 120.0

    # Public model catalog
    MODEL_CATALOG_URL: str = "https://huggingface.co/api/models"
    MODEL_CATALOG_SEARCH: str = "gguf"
    MODEL_CATALOG_LIMIT: int = 12
    MODEL_DOWNLOAD_BASE: str = "https://huggingface.co"

    DEFAULT_VIEW_MODE: str = "all"
    LOG_CAPACITY: int = 500
    LINK_LABEL_ZOOM_THRESHOLD: float = 1.2
    FIT_DURATION_MS: int = 400
    AUDIT_NODE_CLICKS: bool = True

    CORS_ORIGINS: list[str] = [
        "http://localhost:1420",
        "http://localhost:5173",
        "tauri://localhost",
    ]


settings = Settings()
