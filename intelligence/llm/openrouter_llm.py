"""
OpenRouter LLM
通过 OpenAI 兼容接口访问 OpenRouter 上的模型
"""
from typing import Any, List, Optional
import inspect
import logging

import openai

from utils.exceptions import GenerationTransportError, UpstreamGatewayError

from .base import BaseLLM, LLMResponse, Message, looks_like_html


logger = logging.getLogger(__name__)

HTML_RESPONSE_HINT = (
    "OpenRouter returned an HTML response. "
    "Confirm LLM_API_KEY and requested model access."
)


def _error_body(error: Exception) -> Optional[str]:
    """尽量取出错误响应的原始文本"""
    response = getattr(error, "response", None)
    if response is not None:
        try:
            return response.text
        except Exception:
            pass
    body = getattr(error, "body", None)
    return body if isinstance(body, str) else None


class OpenRouterLLM(BaseLLM):
    """
    OpenRouter LLM 实现

    使用 OpenAI SDK, 仅替换 base_url 并附带 OpenRouter 归因请求头。
    """

    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        model: str = "google/gemini-2.5-flash-lite",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        app_url: Optional[str] = None,
        app_title: Optional[str] = None,
        temperature: float = 0.4,
        max_tokens: int = 4096,
        timeout: float = 60.0,
        **kwargs,
    ):
        super().__init__(model, temperature, max_tokens, timeout, **kwargs)
        self.api_key = api_key
        self.base_url = base_url or self.DEFAULT_BASE_URL
        self.default_headers = {}
        if app_url:
            self.default_headers["HTTP-Referer"] = app_url
        if app_title:
            self.default_headers["X-Title"] = app_title
        self._async_client = None

    @property
    def provider(self) -> str:
        return "openrouter"

    def _get_async_client(self):
        """获取异步客户端 (SDK 自带的重试关闭, 重试由上层统一负责)"""
        if self._async_client is None:
            self._async_client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                default_headers=self.default_headers or None,
            )
        return self._async_client

    def _translate_error(self, error: Exception) -> Exception:
        if looks_like_html(_error_body(error)):
            return UpstreamGatewayError(HTML_RESPONSE_HINT, provider=self.provider)
        status_code = getattr(error, "status_code", None)
        return GenerationTransportError(
            f"{self.provider} request failed: {error}",
            provider=self.provider,
            status_code=status_code,
        )

    async def acomplete(
        self,
        messages: List[Message],
        **kwargs: Any,
    ) -> LLMResponse:
        """异步生成响应"""
        client = self._get_async_client()

        request_params = {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if kwargs.get("response_format"):
            request_params["response_format"] = kwargs["response_format"]

        try:
            response = await client.chat.completions.create(**request_params)
        except (openai.APIError, ValueError) as exc:
            raise self._translate_error(exc) from exc

        if isinstance(response, str):
            # a non-JSON body can come back as raw text
            if looks_like_html(response):
                raise UpstreamGatewayError(HTML_RESPONSE_HINT, provider=self.provider)
            raise GenerationTransportError(
                f"{self.provider} returned a non-JSON body",
                provider=self.provider,
            )

        if not getattr(response, "choices", None):
            raise GenerationTransportError(
                f"{self.provider} returned no choices",
                provider=self.provider,
            )

        choice = response.choices[0]
        content = choice.message.content or ""
        if looks_like_html(content):
            raise UpstreamGatewayError(HTML_RESPONSE_HINT, provider=self.provider)

        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=content,
            model=response.model or self.model,
            usage=usage,
            finish_reason=choice.finish_reason,
            raw_response=response,
        )

    async def aclose(self) -> None:
        client = self._async_client
        self._async_client = None
        if client is None:
            return
        close_fn = getattr(client, "close", None)
        if callable(close_fn):
            maybe_awaitable = close_fn()
            if inspect.isawaitable(maybe_awaitable):
                await maybe_awaitable
