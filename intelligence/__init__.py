"""
Intelligence Module
生成层 - LLM 抽象 + 结构化生成 + 流水线编排
"""
from .llm import BaseLLM, LLMResponse, Message, OpenRouterLLM, get_llm
from .json_repair import repair_json
from .structured import StructuredGenerationClient, format_violations
from .pipeline import InsightsPipeline, run_issue_articles, run_metrics_deep_dive

__all__ = [
    # LLM
    "BaseLLM",
    "LLMResponse",
    "Message",
    "OpenRouterLLM",
    "get_llm",
    # Structured generation
    "repair_json",
    "StructuredGenerationClient",
    "format_violations",
    # Pipeline
    "InsightsPipeline",
    "run_issue_articles",
    "run_metrics_deep_dive",
]
