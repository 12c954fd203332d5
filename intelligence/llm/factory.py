"""
LLM Factory
工厂函数 - 根据配置创建 LLM 实例
"""
from typing import Optional
import logging

from config import LLMSettings, get_llm_settings
from utils.exceptions import ConfigurationError

from .base import BaseLLM
from .openrouter_llm import OpenRouterLLM


logger = logging.getLogger(__name__)


def get_llm(
    settings: Optional[LLMSettings] = None,
    model: Optional[str] = None,
    **kwargs,
) -> BaseLLM:
    """
    获取 LLM 实例

    Args:
        settings: LLM 配置 (不传则读取 .env / 环境变量)
        model: 覆盖模型名称
        **kwargs: 额外参数 (temperature, max_tokens 等)

    Returns:
        BaseLLM 实例

    Raises:
        ConfigurationError: 缺少 API Key 或供应商不受支持
    """
    settings = settings or get_llm_settings()

    if settings.provider != "openrouter":
        raise ConfigurationError(
            f"Unsupported LLM provider: {settings.provider}",
            {"supported": ["openrouter"]},
        )

    api_key = kwargs.pop("api_key", None) or settings.api_key
    if not api_key:
        raise ConfigurationError(
            "Missing LLM_API_KEY (or OPENROUTER_API_KEY) environment variable for OpenRouter provider"
        )

    for key, value in {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
        "timeout": settings.timeout,
    }.items():
        kwargs.setdefault(key, value)

    llm = OpenRouterLLM(
        model=model or settings.model_name,
        api_key=api_key,
        base_url=settings.base_url,
        app_url=settings.app_url,
        app_title=settings.app_title,
        **kwargs,
    )
    logger.debug(f"Created {llm!r}")
    return llm
