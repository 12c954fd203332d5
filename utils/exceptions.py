"""
Custom Exceptions
自定义异常类
"""
from typing import List, Optional, Sequence


class CampaignInsightsError(Exception):
    """基础异常类"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(CampaignInsightsError):
    """配置错误"""
    pass


class FeedError(CampaignInsightsError):
    """单个 feed 抓取/解析失败 (在聚合器内部被吸收)"""

    def __init__(self, message: str, feed_url: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.feed_url = feed_url


class NoCandidatesError(CampaignInsightsError):
    """所有 feed 都失败或没有任何候选文章"""
    pass


class RetryValidationError(CampaignInsightsError):
    """重试耗尽且从未抛出异常, 仅校验失败"""

    def __init__(self, attempts: int):
        plural = "" if attempts == 1 else "s"
        super().__init__(f"Validation failed after {attempts} attempt{plural}.")
        self.attempts = attempts


class GenerationTransportError(CampaignInsightsError):
    """生成请求本身失败 (网络 / 鉴权 / 限流)"""

    def __init__(
        self,
        message: str,
        provider: str = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        if status_code is not None:
            kwargs["status_code"] = status_code
        super().__init__(message, kwargs)
        self.provider = provider
        self.status_code = status_code


class SchemaValidationError(CampaignInsightsError):
    """生成结果可解析但违反输出契约"""

    def __init__(self, message: str, violations: Sequence[str] = (), **kwargs):
        super().__init__(message, kwargs)
        self.violations: List[str] = list(violations)

    def __str__(self):
        if self.violations:
            return f"{self.message}: {'; '.join(self.violations)}"
        return super().__str__()


class UpstreamGatewayError(ConfigurationError):
    """上游返回 HTML 页面而不是 API 输出 (通常是鉴权网关)"""

    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider
