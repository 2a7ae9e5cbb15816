# Thin wrapper around the configured LLM provider; one call per batch of questions
# quiz_engine/services/generation_client.py
import threading

from langchain_community.llms import Ollama
from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.output_parsers import StrOutputParser

from quiz_engine.services.prompt_library import QUESTION_PROMPT, prompt_variables
from quiz_engine.utils.config import Settings, settings as default_settings
from quiz_engine.utils.exceptions import UpstreamUnavailable
from quiz_engine.utils.logger import logger


class GenerationClient:
    """
    Issues a single generation call and returns the raw completion text.
    No retries happen here; a failed call surfaces as UpstreamUnavailable.
    """

    def __init__(self, settings: Settings = default_settings):
        self.settings = settings
        self.provider = settings.llm_provider.lower()
        self._llm = None
        self._init_lock = threading.Lock()

    @property
    def model_name(self) -> str:
        return {
            "openrouter": self.settings.openrouter_model_name,
            "openai": self.settings.openai_model_name,
            "google": self.settings.google_model_name,
            "ollama": self.settings.ollama_model,
        }.get(self.provider, "unknown")

    @property
    def is_configured(self) -> bool:
        if self._llm is not None:
            return True
        if self.provider == "openrouter":
            return bool(self.settings.openrouter_api_key)
        if self.provider == "openai":
            return bool(self.settings.openai_api_key)
        if self.provider == "google":
            return bool(self.settings.google_api_key)
        return self.provider == "ollama"

    def _build_llm(self):
        s = self.settings
        if self.provider == "openrouter":
            return ChatOpenAI(
                api_key=s.openrouter_api_key,
                base_url=s.openrouter_base_url,
                model=s.openrouter_model_name,
                temperature=s.llm_temperature,
                max_tokens=s.llm_max_tokens,
                timeout=s.llm_timeout_seconds,
                max_retries=0,
            )
        if self.provider == "openai":
            return ChatOpenAI(
                api_key=s.openai_api_key,
                model=s.openai_model_name,
                temperature=s.llm_temperature,
                max_tokens=s.llm_max_tokens,
                timeout=s.llm_timeout_seconds,
                max_retries=0,
            )
        if self.provider == "google":
            return ChatGoogleGenerativeAI(
                google_api_key=s.google_api_key,
                model=s.google_model_name,
                temperature=s.llm_temperature,
                max_output_tokens=s.llm_max_tokens,
                timeout=s.llm_timeout_seconds,
                max_retries=0,
            )
        if self.provider == "ollama":
            return Ollama(
                base_url=s.ollama_base_url,
                model=s.ollama_model,
                temperature=s.llm_temperature,
                timeout=s.llm_timeout_seconds,
            )
        raise UpstreamUnavailable(f"Unsupported LLM_PROVIDER: {self.provider}")

    def _get_llm(self):
        with self._init_lock:
            if self._llm is None:
                if not self.is_configured:
                    raise UpstreamUnavailable(f"LLM API key not configured for provider '{self.provider}'")
                logger.info(f"Initializing LLM client for provider: {self.provider} (model: {self.model_name})")
                self._llm = self._build_llm()
            return self._llm

    async def generate(self, topic: str, difficulty: str, count: int, language: str) -> str:
        try:
            chain = QUESTION_PROMPT | self._get_llm() | StrOutputParser()
            content = await chain.ainvoke(prompt_variables(topic, difficulty, count, language))
        except UpstreamUnavailable:
            raise
        except Exception as e:
            logger.error(f"Error generating questions via {self.provider}: {e}")
            raise UpstreamUnavailable(f"{self.provider} request failed: {e}") from e

        content = (content or "").strip()
        if not content:
            raise UpstreamUnavailable(f"Empty response from {self.provider}")
        return content
