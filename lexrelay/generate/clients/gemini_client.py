# AI INSTRUCTION:
# Define a client for a Gemini-style generateContent REST endpoint.
# It must expose generate(prompt, params) like the echo client and raise
# ProviderError (with a sanitized message) on any transport or format failure.

import requests
from typing import Tuple, Dict, Any, Optional
from ..types import ModelParams, ProviderError


class GeminiClient:
    def __init__(self, api_key: str, url: str, timeout: float = 60.0, model: Optional[str] = None):
        if not api_key:
            raise ValueError("GeminiClient requires an API key")
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.model = model or url.rsplit("/", 1)[-1].split(":", 1)[0]

    def generate(self, prompt: str, params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        gen_cfg = {}
        if params.temperature is not None:
            gen_cfg["temperature"] = float(params.temperature)
        if params.max_tokens is not None:
            gen_cfg["maxOutputTokens"] = int(params.max_tokens)
        if gen_cfg:
            payload["generationConfig"] = gen_cfg

        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        try:
            resp = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.Timeout:
            raise ProviderError("upstream request timed out") from None
        except requests.RequestException as e:
            raise ProviderError(f"upstream request failed ({type(e).__name__})") from None

        if not 200 <= resp.status_code < 300:
            raise ProviderError(f"upstream returned status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            raise ProviderError("upstream returned a malformed body") from None
        if not isinstance(data, dict):
            raise ProviderError("upstream returned a malformed body")

        return self._first_text(data), {"engine": "gemini", "model": self.model}

    @staticmethod
    def _first_text(data: Dict[str, Any]) -> str:
        """candidates[0].content.parts[0].text, or "" when any step is missing."""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return ""
        return text.strip() if isinstance(text, str) else ""
