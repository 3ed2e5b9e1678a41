# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Inference Providers

Adapters that send a prompt to a hosted model and return its text response.

    huggingface - Hugging Face Inference API (plain HTTP)
    openrouter  - OpenRouter (OpenAI-compatible)
    groq        - Groq (OpenAI-compatible)
    openai      - OpenAI
    anthropic   - Anthropic Messages API
"""

from typing import Any, Dict, Optional

import anthropic
import httpx
import openai

from forgeflow.engine.exceptions import ProviderError

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class InferenceProvider:
    """Base class - subclasses implement infer()"""

    name: str = ""
    display_name: str = ""
    default_model: str = ""

    async def infer(
        self,
        prompt: str,
        model_id: Optional[str],
        credentials: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> Any:
        raise NotImplementedError


class HuggingFaceProvider(InferenceProvider):
    """Hugging Face Inference API"""

    name = "huggingface"
    display_name = "Hugging Face"
    default_model = "gpt2"

    def __init__(self, client: httpx.AsyncClient, base_url: str = "https://api-inference.huggingface.co/models"):
        self.client = client
        self.base_url = base_url.rstrip("/")

    async def infer(self, prompt, model_id, credentials, system_prompt=None, temperature=0.7, max_tokens=500):
        try:
            response = await self.client.post(
                f"{self.base_url}/{model_id or self.default_model}",
                headers={"Authorization": f"Bearer {credentials}"},
                json={
                    "inputs": prompt,
                    "parameters": {"temperature": temperature, "max_new_tokens": max_tokens},
                },
            )
        except httpx.TransportError as e:
            raise ProviderError(self.display_name, str(e) or type(e).__name__, retryable=True)

        if response.status_code >= 400:
            raise ProviderError(
                self.display_name,
                response.text,
                retryable=_is_retryable_status(response.status_code),
            )

        try:
            result = response.json()
        except ValueError:
            raise ProviderError(self.display_name, "malformed response (not JSON)")

        # Text-generation models answer [{"generated_text": "..."}]
        if isinstance(result, list) and result and isinstance(result[0], dict) and "generated_text" in result[0]:
            return result[0]["generated_text"]
        if isinstance(result, dict) and result.get("error"):
            raise ProviderError(self.display_name, str(result["error"]))
        return result


class OpenAICompatibleProvider(InferenceProvider):
    """Chat-completions providers reached through the openai SDK"""

    def __init__(
        self,
        name: str,
        display_name: str,
        default_model: str,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.name = name
        self.display_name = display_name
        self.default_model = default_model
        self.base_url = base_url
        self.default_headers = default_headers or {}
        self.timeout = timeout
        self.http_client = http_client

    async def infer(self, prompt, model_id, credentials, system_prompt=None, temperature=0.7, max_tokens=500):
        # Retries are handled by the engine's retry policy
        client = openai.AsyncOpenAI(
            api_key=credentials,
            base_url=self.base_url,
            default_headers=self.default_headers,
            timeout=self.timeout,
            max_retries=0,
            http_client=self.http_client,
        )
        try:
            completion = await client.chat.completions.create(
                model=model_id or self.default_model,
                messages=[
                    {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as e:
            raise ProviderError(self.display_name, e.message, retryable=_is_retryable_status(e.status_code))
        except openai.APIConnectionError as e:
            raise ProviderError(self.display_name, e.message, retryable=True)
        except openai.APIError as e:
            raise ProviderError(self.display_name, e.message)
        finally:
            if self.http_client is None:
                await client.close()

        if not completion.choices:
            raise ProviderError(self.display_name, "malformed response (no choices)")
        return completion.choices[0].message.content or "No response"


class AnthropicProvider(InferenceProvider):
    """Anthropic Messages API"""

    name = "anthropic"
    display_name = "Anthropic"
    default_model = "claude-3-5-haiku-latest"

    def __init__(self, timeout: float = 30.0, http_client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self.http_client = http_client

    async def infer(self, prompt, model_id, credentials, system_prompt=None, temperature=0.7, max_tokens=500):
        client = anthropic.AsyncAnthropic(
            api_key=credentials,
            timeout=self.timeout,
            max_retries=0,
            http_client=self.http_client,
        )
        try:
            response = await client.messages.create(
                model=model_id or self.default_model,
                max_tokens=max_tokens,
                temperature=min(temperature, 1.0),
                system=system_prompt or DEFAULT_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise ProviderError(self.display_name, e.message, retryable=_is_retryable_status(e.status_code))
        except anthropic.APIConnectionError as e:
            raise ProviderError(self.display_name, e.message, retryable=True)
        except anthropic.APIError as e:
            raise ProviderError(self.display_name, e.message)
        finally:
            if self.http_client is None:
                await client.close()

        text_blocks = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not text_blocks:
            raise ProviderError(self.display_name, "malformed response (no text content)")
        return "".join(text_blocks)


class ProviderRegistry:
    """Registry of available inference providers"""

    def __init__(self):
        self.providers: Dict[str, InferenceProvider] = {}

    def register(self, provider: InferenceProvider) -> None:
        self.providers[provider.name] = provider

    def get(self, name: str) -> Optional[InferenceProvider]:
        return self.providers.get(name)

    def names(self):
        return sorted(self.providers)


def build_default_registry(client: httpx.AsyncClient, timeout: float = 30.0) -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(HuggingFaceProvider(client))
    registry.register(OpenAICompatibleProvider(
        name="openrouter",
        display_name="OpenRouter",
        default_model="openai/gpt-3.5-turbo",
        base_url="https://openrouter.ai/api/v1",
        default_headers={"HTTP-Referer": "https://forgeflow.app", "X-Title": "ForgeFlow"},
        timeout=timeout,
    ))
    registry.register(OpenAICompatibleProvider(
        name="groq",
        display_name="Groq",
        default_model="llama-3.1-8b-instant",
        base_url="https://api.groq.com/openai/v1",
        timeout=timeout,
    ))
    registry.register(OpenAICompatibleProvider(
        name="openai",
        display_name="OpenAI",
        default_model="gpt-4o-mini",
        timeout=timeout,
    ))
    registry.register(AnthropicProvider(timeout=timeout))
    return registry
