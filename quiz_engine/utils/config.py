# quiz_engine/utils/config.py
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()

class Settings(BaseSettings):
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- LLM Provider Configuration ---
    llm_provider: str = os.getenv("LLM_PROVIDER", "openrouter").lower()

    # OpenRouter specific (OpenAI-compatible endpoint)
    openrouter_api_key: str | None = os.getenv("OPENROUTER_API_KEY") or os.getenv("LLAMA_API_KEY")
    openrouter_model_name: str = os.getenv("LLAMA_MODEL", "meta-llama/llama-3.1-8b-instruct")
    openrouter_base_url: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

    # Ollama specific
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "mistral")

    # OpenAI specific
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model_name: str = os.getenv("OPENAI_MODEL_NAME", "gpt-4o-mini")

    # Google Gemini specific
    google_api_key: str | None = os.getenv("GOOGLE_API_KEY")
    google_model_name: str = os.getenv("GOOGLE_MODEL_NAME", "gemini-1.5-flash-latest")

    # Generation parameters shared by all providers
    llm_temperature: float = float(os.getenv("LLAMA_TEMPERATURE", "0.3"))
    llm_max_tokens: int = int(os.getenv("LLAMA_MAX_TOKENS", "1200"))
    llm_timeout_seconds: float = 60.0

    # Batching
    default_batch_size: int = int(os.getenv("LLAMA_BATCH_SIZE", "10"))
    max_parallel: int = int(os.getenv("LLAMA_MAX_PARALLEL", "3"))

    # Result cache
    cache_ttl_seconds: float = 6 * 60 * 60
    cache_max_entries: int = 200

settings = Settings()
