"""
LLM backends. Each provider turns a prompt into raw model text; parsing lives in parse.py.
SDKs are imported lazily so a deployment only needs the one it uses.
"""
import logging
from typing import Protocol

from evalhub.shared.config import settings
from evalhub.llm.errors import LLMUnavailable
from evalhub.llm.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

class Provider(Protocol):
    name: str
    def generate(self, prompt: str) -> str: ...

class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str, model: str, timeout_ms: int = 30_000):
        self.api_key = api_key
        self.model = model
        self.timeout_ms = timeout_ms

    def generate(self, prompt: str) -> str:
        from google import genai

        client = genai.Client(api_key=self.api_key)
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config={
                    "temperature": 0.7,
                    "top_k": 1,
                    "top_p": 1,
                    "max_output_tokens": 2048,
                    "http_options": {"timeout": self.timeout_ms},
                },
            )
        except Exception as e:
            raise LLMUnavailable(f"gemini call failed: {e}") from e
        return response.text or ""

class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str, timeout: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        from openai import OpenAI, OpenAIError

        client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=2000,
            )
        except OpenAIError as e:
            raise LLMUnavailable(f"openai call failed: {e}") from e
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

def get_provider(name: str | None = None) -> Provider:
    name = (name or settings.LLM_PROVIDER).lower()
    if name == "gemini":
        if not settings.GEMINI_API_KEY:
            raise LLMUnavailable("GEMINI_API_KEY not set")
        return GeminiProvider(settings.GEMINI_API_KEY, settings.GEMINI_MODEL)
    if name == "openai":
        if not settings.OPENAI_API_KEY:
            raise LLMUnavailable("OPENAI_API_KEY not set")
        return OpenAIProvider(settings.OPENAI_API_KEY, settings.OPENAI_MODEL)
    raise LLMUnavailable(f"unknown LLM provider: {name}")
