"""
Base LLM
LLM 抽象基类
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from enum import Enum
import re


_HTML_PAGE_RE = re.compile(r"^\s*(?:<!doctype\s+html|<html[\s>])", flags=re.IGNORECASE)


def looks_like_html(text: Optional[str]) -> bool:
    """上游返回的是 HTML 页面 (例如鉴权网关) 而不是 JSON / 文本"""
    if not isinstance(text, str):
        return False
    return bool(_HTML_PAGE_RE.match(text[:2000]))


class MessageRole(str, Enum):
    """消息角色"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """对话消息"""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典 (用于 API 调用)"""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=MessageRole.ASSISTANT, content=content)


@dataclass
class LLMResponse:
    """LLM 响应"""
    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)  # prompt_tokens, completion_tokens, total_tokens
    finish_reason: Optional[str] = None
    raw_response: Optional[Any] = None


class BaseLLM(ABC):
    """
    LLM 抽象基类

    所有 LLM 供应商实现需继承此类。
    实现方需要把传输层失败转换为 GenerationTransportError,
    把 HTML 页面响应转换为 UpstreamGatewayError。
    """

    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        timeout: float = 60.0,
        **kwargs,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.extra_config = kwargs

    @property
    @abstractmethod
    def provider(self) -> str:
        """返回供应商名称"""
        pass

    @abstractmethod
    async def acomplete(
        self,
        messages: List[Message],
        **kwargs,
    ) -> LLMResponse:
        """
        异步生成响应

        Args:
            messages: 对话消息列表
            **kwargs: 额外参数 (temperature, max_tokens, response_format)

        Returns:
            LLMResponse
        """
        pass

    async def aclose(self) -> None:
        """关闭底层客户端资源（默认 no-op）"""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, provider={self.provider})"
