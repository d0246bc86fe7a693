# Role: Thin Gemini wrapper used by the LLM slot extractor. One call shape: prompt in, text out,
# optionally constrained to a JSON response. SDK failures surface as RuntimeError so the caller can
# fall back to the rule-based extractor.

import os
from typing import Optional

from google import genai
from google.genai import types

import trip_assistant.config as config

DEFAULT_MODEL = "gemini-2.0-flash"

# Slot JSON is small; a low cap keeps latency predictable.
DEFAULT_MAX_OUTPUT_TOKENS = 512


class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.0,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> None:
        # Key line: secrets only come from the environment (.env via config.load_env()).
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise RuntimeError("Missing GEMINI_API_KEY in environment or .env")

        self.model_name = model or os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.client = genai.Client(api_key=self.api_key)

    def _request_config(self, json_mode: bool) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json" if json_mode else "text/plain",
        )

    def generate_text(self, prompt: str, *, json_mode: bool = False) -> str:
        # 1) Reject empty prompts
        # 2) One generate_content call
        # 3) Empty answers count as failures
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValueError("Prompt must be non-empty.")

        try:
            resp = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._request_config(json_mode),
            )
        except Exception as e:
            raise RuntimeError(f"Gemini API call failed: {e}") from e

        text = (getattr(resp, "text", None) or "").strip()
        if not text:
            raise RuntimeError("Gemini returned an empty response.")

        if config.DEBUG:
            print("GEMINI model:", self.model_name, "| json_mode:", json_mode, "| chars:", len(text))
        return text
