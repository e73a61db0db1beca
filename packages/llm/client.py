from typing import Any, Dict, List, Optional

import aiohttp
from loguru import logger

from packages.doppler.client import get_secret

PROVIDER_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "xai": "https://api.x.ai/v1",
}

DEFAULT_MODELS = {
    "openai": "gpt-4",
    "xai": "grok-beta",
    "local": "openai/gpt-oss-120b",
}

DEFAULT_LOCAL_AI_BASE_URL = "http://127.0.0.1:8355/v1"


class LLMRequestError(Exception):
    """Exception raised when the chat completion API cannot be reached or answers with an error."""

    pass


class ChatCompletionClient:
    """OpenAI 호환 chat completions API 클라이언트 (openai, xai, local)"""

    def __init__(
        self,
        provider: str = "openai",
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        local_base_url: str = DEFAULT_LOCAL_AI_BASE_URL,
        timeout_seconds: int = 60,
    ):
        self.provider = provider
        self.api_key = api_key
        self.model = model or DEFAULT_MODELS.get(provider)
        self.timeout_seconds = timeout_seconds

        if provider == "local":
            self.base_url = local_base_url
        else:
            self.base_url = PROVIDER_BASE_URLS.get(provider)

    @classmethod
    def from_secrets(cls) -> "ChatCompletionClient":
        return cls(
            provider=get_secret("AI_PROVIDER", "openai"),
            api_key=get_secret("AI_API_KEY", None),
            model=get_secret("AI_MODEL", None),
            local_base_url=get_secret("LOCAL_AI_BASE_URL", DEFAULT_LOCAL_AI_BASE_URL),
        )

    @property
    def is_configured(self) -> bool:
        """
        사용 가능한 백엔드가 있는지 여부
        - openai / xai: base URL과 API 키 필요
        - local: 내부망 서버이므로 API 키 불필요
        - 그 외(huggingface 등): 미지원 → 키워드 규칙으로 대체
        """
        if self.base_url is None or self.model is None:
            return False
        if self.provider == "local":
            return True
        return bool(self.api_key)

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """
        chat completions API를 호출하고 첫 번째 choice의 content를 반환합니다.

        Raises:
            LLMRequestError: 백엔드 미설정, 네트워크 오류, 200이 아닌 응답, 비어 있는 응답
        """
        if not self.is_configured:
            raise LLMRequestError(f"AI provider '{self.provider}' is not configured")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        logger.info(f"Calling {self.provider} chat completions with model: {self.model}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"{self.provider} API error: {error_text}")
                        raise LLMRequestError(f"{self.provider} API returned error: {error_text}")

                    result: Dict[str, Any] = await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"Network error calling {self.provider} API: {str(e)}")
            raise LLMRequestError(f"Failed to connect to {self.provider} API: {str(e)}") from e

        logger.info(f"{self.provider} API call successful. Tokens used: {result.get('usage', {})}")

        content = result.get("choices", [{}])[0].get("message", {}).get("content")
        if not content:
            raise LLMRequestError(f"{self.provider} API returned an empty message")
        return content
