"""
Unified LLM Interface Manager

Supports the OpenAI chat-completions API (cloud) and a local Ollama server,
behind one interface. Failures raise LLMError; callers decide the fallback.

Example:
    # Cloud mode (needs OPENAI_API_KEY)
    llm = create_cloud_llm()
    text = llm.query("When should I plant pepper in Wayanad?")

    # Local mode (free, requires `ollama serve`)
    llm = create_local_llm()
    data = llm.query_json("Give 3 tasks as JSON", system_prompt="Reply in JSON.")

    # Switch modes dynamically
    llm.switch_mode("local")
"""

import json
import os
import re
from typing import Dict, Literal, Optional

import requests
from dotenv import load_dotenv

load_dotenv()


class LLMError(Exception):
    """Raised when the LLM backend cannot produce a usable answer."""


class LLMManager:
    """Unified LLM interface supporting cloud OpenAI and local Ollama."""

    def __init__(
        self,
        mode: Optional[Literal["cloud", "local"]] = None,
        local_model: Optional[str] = None,
        cloud_api_key: Optional[str] = None,
        cloud_model: Optional[str] = None,
    ):
        """
        Initialize LLM Manager.

        Args:
            mode: "cloud" for OpenAI or "local" for Ollama (default: LLM_MODE env, else cloud)
            local_model: Ollama model name (default: OLLAMA_MODEL env, else llama3.2:latest)
            cloud_api_key: OpenAI key (default: OPENAI_API_KEY or OPENAI_KEY env)
            cloud_model: OpenAI model name (default: OPENAI_MODEL env, else gpt-4o-mini)
        """
        self.mode = mode or os.getenv("LLM_MODE", "cloud")
        self.local_model = local_model or os.getenv("OLLAMA_MODEL", "llama3.2:latest")
        self.local_url = os.getenv("OLLAMA_URL", "http://localhost:11434/api/generate")
        self.cloud_url = "https://api.openai.com/v1/chat/completions"
        self.cloud_model = cloud_model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.cloud_api_key = (
            cloud_api_key or os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_KEY") or ""
        )
        self.timeout = 30

        if self.mode == "local":
            print(f"[LLM] LOCAL mode - Ollama model: {self.local_model}")
        elif self.cloud_api_key:
            print(f"[LLM] CLOUD mode - OpenAI model: {self.cloud_model}")
        else:
            print("⚠️ [LLM] CLOUD mode selected but OPENAI_API_KEY not found - fallbacks will be used")

    @property
    def available(self) -> bool:
        return self.mode == "local" or bool(self.cloud_api_key)

    def query(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 500,
    ) -> str:
        """
        Query the LLM and return its text answer.

        Raises:
            LLMError: on transport errors, bad status codes or empty output.
        """
        if self.mode == "local":
            text = self._query_local(prompt, system_prompt, temperature, json_mode=False)
        elif self.mode == "cloud":
            text = self._query_cloud(prompt, system_prompt, temperature, max_tokens, json_mode=False)
        else:
            raise LLMError(f"Invalid mode '{self.mode}'")
        return text.strip()

    def query_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 800,
    ) -> Dict:
        """Query the LLM in JSON mode and return the parsed object."""
        if self.mode == "local":
            text = self._query_local(prompt, system_prompt, temperature, json_mode=True)
        elif self.mode == "cloud":
            text = self._query_cloud(prompt, system_prompt, temperature, max_tokens, json_mode=True)
        else:
            raise LLMError(f"Invalid mode '{self.mode}'")
        return parse_json_block(text)

    def _query_local(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        json_mode: bool,
    ) -> str:
        """Query local Ollama instance."""
        full_prompt = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt
        payload = {
            "model": self.local_model,
            "prompt": full_prompt,
            "stream": False,
            "options": {"temperature": temperature},
        }
        if json_mode:
            payload["format"] = "json"

        try:
            response = requests.post(self.local_url, json=payload, timeout=self.timeout)
        except requests.exceptions.ConnectionError as exc:
            raise LLMError("Cannot connect to Ollama. Make sure 'ollama serve' is running") from exc
        except requests.exceptions.Timeout as exc:
            raise LLMError(f"Ollama query timed out ({self.timeout}s)") from exc
        except requests.exceptions.RequestException as exc:
            raise LLMError(f"Ollama request failed - {exc}") from exc

        if response.status_code != 200:
            raise LLMError(f"Ollama returned status {response.status_code}")

        try:
            text = response.json().get("response", "")
        except (ValueError, AttributeError, TypeError) as exc:
            raise LLMError(f"Ollama returned an unreadable body - {exc}") from exc
        if not text:
            raise LLMError("Ollama returned an empty response")
        return text

    def _query_cloud(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> str:
        """Query the OpenAI chat-completions API."""
        if not self.cloud_api_key:
            raise LLMError("OPENAI_API_KEY not set")

        headers = {
            "Authorization": f"Bearer {self.cloud_api_key}",
            "Content-Type": "application/json",
        }
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.cloud_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = requests.post(self.cloud_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as exc:
            raise LLMError(f"OpenAI query timed out ({self.timeout}s)") from exc
        except requests.exceptions.RequestException as exc:
            raise LLMError(f"OpenAI request failed - {exc}") from exc

        if response.status_code == 401:
            raise LLMError("Invalid OpenAI API key. Check OPENAI_API_KEY")
        if response.status_code == 429:
            raise LLMError("OpenAI rate limit exceeded. Try again later")
        if response.status_code != 200:
            raise LLMError(f"OpenAI returned status {response.status_code}")

        try:
            choices = response.json().get("choices") or []
            text = (choices[0].get("message") or {}).get("content") if choices else None
        except (ValueError, AttributeError, TypeError, IndexError) as exc:
            raise LLMError(f"OpenAI returned an unreadable body - {exc}") from exc
        if not text:
            raise LLMError("OpenAI returned an empty response")
        return text

    def switch_mode(self, new_mode: Literal["cloud", "local"]) -> str:
        """Switch between cloud and local modes. Returns a status message."""
        if new_mode not in ("cloud", "local"):
            return f"Invalid mode '{new_mode}'. Use 'cloud' or 'local'"

        self.mode = new_mode
        if new_mode == "local":
            print(f"[LLM] Switched to LOCAL mode ({self.local_model})")
            return "Switched to LOCAL mode"
        if self.cloud_api_key:
            print(f"[LLM] Switched to CLOUD mode ({self.cloud_model})")
            return "Switched to CLOUD mode"
        print("⚠️ [LLM] CLOUD mode selected but API key not available")
        return "CLOUD mode selected but OPENAI_API_KEY not set"


def parse_json_block(text: str) -> Dict:
    """Parse the first {...} block in an LLM answer."""
    match = re.search(r"\{.*\}", text or "", re.DOTALL)
    if not match:
        raise LLMError("No JSON object in LLM response")
    try:
        result = json.loads(match.group())
    except json.JSONDecodeError as exc:
        raise LLMError(f"Malformed JSON from LLM - {exc}") from exc
    if not isinstance(result, dict):
        raise LLMError("LLM JSON is not an object")
    return result


def create_local_llm(model: str = "llama3.2:latest") -> LLMManager:
    """Create LLM Manager in local mode (free, requires Ollama)."""
    return LLMManager(mode="local", local_model=model)


def create_cloud_llm(api_key: Optional[str] = None) -> LLMManager:
    """Create LLM Manager in cloud mode (OpenAI)."""
    return LLMManager(mode="cloud", cloud_api_key=api_key)
