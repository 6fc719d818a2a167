import asyncio
import json
import re
import structlog
from typing import Optional, Dict, Any, List
from enum import Enum

import openai
import anthropic
import google.generativeai as genai

from ..exceptions import AIGenerationError, LLMServiceError

logger = structlog.get_logger(__name__)

_CODE_FENCE = re.compile(r"```(?:json|JSON)?")


class LLMProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"


class LLMService:
    FALLBACK_ORDER = [LLMProvider.GOOGLE, LLMProvider.OPENAI, LLMProvider.ANTHROPIC]

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        anthropic_api_key: Optional[str] = None,
        google_api_key: Optional[str] = None,
        openai_model_name: str = "gpt-4o-mini",
        anthropic_model_name: str = "claude-3-haiku-20240307",
        google_model_name: str = "gemini-1.5-flash",
        timeout_seconds: float = 60.0
    ):
        self.openai_model_name = openai_model_name
        self.anthropic_model_name = anthropic_model_name
        self.google_model_name = google_model_name
        self.timeout_seconds = timeout_seconds

        self.openai_client = None
        self.anthropic_client = None
        self.google_client = None

        if openai_api_key:
            try:
                self.openai_client = openai.OpenAI(api_key=openai_api_key)
                logger.info("OpenAI client initialized")
            except Exception as e:
                logger.warning("Failed to initialize OpenAI client", error=str(e))

        if anthropic_api_key:
            try:
                self.anthropic_client = anthropic.Anthropic(api_key=anthropic_api_key)
                logger.info("Anthropic client initialized")
            except Exception as e:
                logger.warning("Failed to initialize Anthropic client", error=str(e))

        if google_api_key:
            try:
                genai.configure(api_key=google_api_key)
                self.google_client = genai.GenerativeModel(self.google_model_name)
                logger.info("Google Gemini client initialized", model=self.google_model_name)
            except Exception as e:
                logger.warning("Failed to initialize Google Gemini client", error=str(e))

    async def generate_with_fallback(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        preferred_provider: Optional[LLMProvider] = None
    ) -> str:
        """
        Generate a response, walking the configured providers until one answers.

        Order is Gemini, OpenAI, Anthropic unless preferred_provider is given,
        in which case it is tried first. Each call is bounded by timeout_seconds.
        Raises AIGenerationError when no provider produced a response.
        """
        providers_to_try = [p for p in self.FALLBACK_ORDER if self._is_provider_available(p)]
        if preferred_provider and preferred_provider in providers_to_try:
            providers_to_try.remove(preferred_provider)
            providers_to_try.insert(0, preferred_provider)

        if not providers_to_try:
            raise AIGenerationError(
                "No LLM provider configured. Please set GEMINI_API_KEY in your .env file.",
                error_code="AI_NOT_CONFIGURED"
            )

        errors: Dict[str, str] = {}
        for provider in providers_to_try:
            try:
                logger.info("Attempting generation", provider=provider.value)
                return await self._generate_with_provider(
                    provider, system_prompt, user_prompt, temperature, max_tokens
                )
            except LLMServiceError as e:
                errors[provider.value] = e.message
                logger.warning("Provider failed, trying next provider", provider=provider.value, error=e.message)

        raise AIGenerationError(
            f"AI question generation failed: {'; '.join(errors.values())}",
            details={"providers": errors}
        )

    async def _generate_with_provider(
        self,
        provider: LLMProvider,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int
    ) -> str:
        if provider == LLMProvider.OPENAI:
            call = self._generate_openai
        elif provider == LLMProvider.ANTHROPIC:
            call = self._generate_anthropic
        elif provider == LLMProvider.GOOGLE:
            call = self._generate_google
        else:
            raise LLMServiceError(f"Unknown provider: {provider}")

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(call, system_prompt, user_prompt, temperature, max_tokens),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            raise LLMServiceError(f"{provider.value} timed out after {self.timeout_seconds}s")

    def _generate_openai(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        if not self.openai_client:
            raise LLMServiceError("OpenAI client not available")

        try:
            response = self.openai_client.chat.completions.create(
                model=self.openai_model_name,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ]
            )
            result = response.choices[0].message.content or ""
            logger.info("OpenAI generation completed", model=self.openai_model_name, response_length=len(result))
            return result

        except openai.AuthenticationError as e:
            raise LLMServiceError(f"OpenAI authentication failed: {str(e)}")
        except openai.RateLimitError as e:
            raise LLMServiceError(f"OpenAI rate limit exceeded: {str(e)}")
        except Exception as e:
            raise LLMServiceError(f"OpenAI generation failed: {str(e)}")

    def _generate_anthropic(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        if not self.anthropic_client:
            raise LLMServiceError("Anthropic client not available")

        try:
            messages = [{"role": "user", "content": user_prompt}]
            kwargs = {"system": system_prompt} if system_prompt else {}
            response = self.anthropic_client.messages.create(
                model=self.anthropic_model_name,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=messages,
                **kwargs
            )
            result = response.content[0].text
            logger.info("Anthropic generation completed", model=self.anthropic_model_name, response_length=len(result))
            return result

        except Exception as e:
            raise LLMServiceError(f"Anthropic generation failed: {str(e)}")

    def _generate_google(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        if not self.google_client:
            raise LLMServiceError("Google client not available")

        try:
            generation_config = genai.types.GenerationConfig(
                temperature=temperature,
                max_output_tokens=max_tokens
            )

            full_prompt = f"{system_prompt}\n\n{user_prompt}" if system_prompt else user_prompt

            response = self.google_client.generate_content(
                full_prompt,
                generation_config=generation_config
            )
            result = response.text
            logger.info("Google generation completed", model=self.google_model_name, response_length=len(result))
            return result

        except Exception as e:
            raise LLMServiceError(f"Google generation failed: {str(e)}")

    def _is_provider_available(self, provider: LLMProvider) -> bool:
        if provider == LLMProvider.OPENAI:
            return self.openai_client is not None
        elif provider == LLMProvider.ANTHROPIC:
            return self.anthropic_client is not None
        elif provider == LLMProvider.GOOGLE:
            return self.google_client is not None
        return False

    def get_available_providers(self) -> List[LLMProvider]:
        return [p for p in self.FALLBACK_ORDER if self._is_provider_available(p)]

    def is_available(self) -> bool:
        return bool(self.get_available_providers())

    async def probe(self) -> None:
        """
        Sends a trivial "Hello" prompt to the first configured provider.

        Raises AIGenerationError when nothing is configured or the call fails.
        """
        providers = self.get_available_providers()
        if not providers:
            raise AIGenerationError(
                "Gemini API key not configured. Please set GEMINI_API_KEY in your .env file.",
                error_code="AI_NOT_CONFIGURED"
            )
        try:
            await self._generate_with_provider(providers[0], "", "Hello", 0.0, 16)
        except LLMServiceError as e:
            raise AIGenerationError(e.message, details={"provider": providers[0].value})

    def extract_json_object(self, response: str) -> Optional[str]:
        """
        First balanced {...} span of the response, markdown fences removed.

        Braces inside JSON string literals are ignored while counting.
        """
        text = _CODE_FENCE.sub("", response or "")
        start = text.find("{")
        while start != -1:
            depth = 0
            in_string = False
            escaped = False
            for i in range(start, len(text)):
                char = text[i]
                if in_string:
                    if escaped:
                        escaped = False
                    elif char == "\\":
                        escaped = True
                    elif char == '"':
                        in_string = False
                    continue
                if char == '"':
                    in_string = True
                elif char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
                    if depth == 0:
                        return text[start:i + 1]
            start = text.find("{", start + 1)
        return None

    async def parse_json_response(self, response: str) -> Dict[str, Any]:
        """Parsed JSON object from a model response, or {} when none can be decoded."""
        try:
            parsed = json.loads((response or "").strip())
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        candidate = self.extract_json_object(response)
        if candidate is None:
            return {}
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.warning("Failed to decode JSON span from model response", error=str(e))
            return {}
        return parsed if isinstance(parsed, dict) else {}
