"""
LLM Module
生成模型抽象层
"""
from .base import BaseLLM, LLMResponse, Message, MessageRole, looks_like_html
from .openrouter_llm import OpenRouterLLM
from .factory import get_llm

__all__ = [
    "BaseLLM",
    "LLMResponse",
    "Message",
    "MessageRole",
    "OpenRouterLLM",
    "get_llm",
    "looks_like_html",
]
