from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache
from pathlib import Path

# Offered by the UIs when the daemon can't be asked for its model list
FALLBACK_MODELS = ["llama3.1", "llama2", "mistral", "codellama"]

# Single-page chat client served under /ui/
STATIC_DIR = Path(__file__).parent / "static"


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000

    # Ollama settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_timeout: float | None = None  # None means wait forever
    default_model: str = "llama3.1"

    # Logging settings
    log_dir: str = "logs"

    # Chat UI settings
    serve_ui: bool = True
    chat_api_url: str = "http://localhost:3000"


@lru_cache
def get_settings() -> Settings:
    return Settings()
