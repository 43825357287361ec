"""Text generation: provider backends and the never-failing gateway in front of them."""

import logging
import random
import re

import openai
import requests

from v0id.prompts import FALLBACK_RESPONSES

logger = logging.getLogger("v0id.provider")

HF_DEFAULT_URL = "https://api-inference.huggingface.co/models/microsoft/DialoGPT-medium"


class TransportError(Exception):
    """Network failure, timeout, or non-2xx status."""


class MalformedResponse(Exception):
    """The service answered, but without the text we expected."""


class Provider:
    """Base class. Subclasses implement chat for a specific API."""

    def chat(self, input_list: list, instructions: str = None,
             max_tokens: int = 120) -> dict:
        """Returns {"text": str|None}"""
        raise NotImplementedError

    def chat_short(self, prompt: str, instructions: str = None,
                   max_tokens: int = 120) -> str | None:
        result = self.chat([{"role": "user", "content": prompt}],
                           instructions=instructions, max_tokens=max_tokens)
        return result["text"]


class OpenAIProvider(Provider):
    """Uses OpenAI Responses API."""

    def __init__(self, api_key: str, model: str, timeout: float = 10):
        self.model = model
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def chat(self, input_list, instructions=None, max_tokens=120):
        kwargs = {
            "model": self.model,
            "input": input_list,
            "max_output_tokens": max_tokens,
        }
        if instructions:
            kwargs["instructions"] = instructions

        response = self._client.responses.create(**kwargs)

        text_parts = []
        for item in response.output:
            if item.type == "message":
                for content in item.content:
                    if getattr(content, "text", None):
                        text_parts.append(content.text)

        return {"text": "\n".join(text_parts) if text_parts else None}


class LocalProvider(Provider):
    """Uses OpenAI-compatible Chat Completions API, for vLLM and similar."""

    def __init__(self, base_url: str, model: str, api_key: str = "not-needed",
                 timeout: float = 10):
        self.base_url = base_url
        self.model = model
        self._client = openai.OpenAI(base_url=base_url, api_key=api_key,
                                     timeout=timeout, max_retries=0)

    def chat(self, input_list, instructions=None, max_tokens=120):
        messages = []
        if instructions:
            messages.append({"role": "system", "content": instructions})
        messages.extend(input_list)

        kwargs = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        # Disable Qwen3 thinking mode for local vLLM
        if "localhost" in self.base_url or "127.0.0.1" in self.base_url:
            kwargs["extra_body"] = {"chat_template_kwargs": {"enable_thinking": False}}

        response = self._client.chat.completions.create(**kwargs)
        if not response.choices:
            raise MalformedResponse("no choices in completion")

        text = response.choices[0].message.content
        # Strip any <think> blocks that slip through
        if text:
            text = re.sub(r'<think>.*?</think>\s*', '', text, flags=re.DOTALL)
            text = re.sub(r'<think>.*$', '', text, flags=re.DOTALL)
            text = text.strip() or None
        return {"text": text}


class HuggingFaceProvider(Provider):
    """Public Inference API text generation over plain HTTP."""

    def __init__(self, url: str = HF_DEFAULT_URL, token: str | None = None,
                 timeout: float = 10):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._session = requests.Session()

    def chat(self, input_list, instructions=None, max_tokens=120):
        prompt = "\n\n".join(
            m["content"] for m in input_list if isinstance(m.get("content"), str)
        )
        if instructions:
            prompt = f"{instructions}\n\n{prompt}"

        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        body = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": max_tokens,
                "temperature": 0.8,
                "do_sample": True,
                "return_full_text": False,
            },
        }

        try:
            resp = self._session.post(self.url, json=body, headers=headers,
                                      timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e
        if not resp.ok:
            raise TransportError(f"HTTP {resp.status_code} from {self.url}")

        try:
            result = resp.json()
            text = result[0]["generated_text"]
        except (ValueError, LookupError, TypeError) as e:
            raise MalformedResponse(f"unexpected response shape: {e}") from e
        return {"text": text.strip() if isinstance(text, str) else None}


def create_provider(settings: dict) -> Provider:
    """Factory: create the right provider from a config dict."""
    provider_type = settings.get("provider", "openai")
    timeout = settings.get("llm_timeout_seconds", 10)

    if provider_type == "local":
        return LocalProvider(
            base_url=settings["base_url"],
            model=settings["model"],
            api_key=settings.get("api_key") or "not-needed",
            timeout=timeout,
        )
    if provider_type == "huggingface":
        return HuggingFaceProvider(
            url=settings.get("hf_url") or HF_DEFAULT_URL,
            token=settings.get("hf_token"),
            timeout=timeout,
        )
    return OpenAIProvider(
        api_key=settings["api_key"],
        model=settings["model"],
        timeout=timeout,
    )


class Gateway:
    """prompt -> text, and it never raises.

    Any failure turns into a line from the canned table. last_error
    carries the latest transport failure until a call succeeds.
    """

    def __init__(self, provider: Provider | None, max_tokens: int = 120,
                 rng: random.Random | None = None):
        self.provider = provider
        self.max_tokens = max_tokens
        self.rng = rng or random.Random()
        self.last_error: str | None = None
        self.calls = 0
        self.fallbacks = 0

    def generate(self, prompt: str) -> str:
        self.calls += 1
        if self.provider is None:
            return self.fallback(prompt)

        try:
            text = self.provider.chat_short(prompt, max_tokens=self.max_tokens)
        except MalformedResponse as e:
            logger.warning(f"Malformed response, using fallback: {e}")
            return self.fallback(prompt)
        except Exception as e:
            self.last_error = f"Text generation failed: {e}"
            logger.warning(f"LLM call failed, using fallback: {e}")
            return self.fallback(prompt)

        if not text or not text.strip():
            logger.warning("Empty completion, using fallback")
            return self.fallback(prompt)

        self.last_error = None
        return text.strip()

    def fallback(self, prompt: str) -> str:
        self.fallbacks += 1
        return self.rng.choice(FALLBACK_RESPONSES[fallback_category(prompt)])


def fallback_category(prompt: str) -> str:
    lowered = prompt.lower()
    for key in FALLBACK_RESPONSES:
        if key != "default" and key in lowered:
            return key
    return "default"
