"""
Utils Module
通用工具: 日志、异常、重试
"""
from .logger import setup_logger, configure_package_loggers
from .exceptions import (
    CampaignInsightsError,
    ConfigurationError,
    FeedError,
    NoCandidatesError,
    RetryValidationError,
    GenerationTransportError,
    SchemaValidationError,
    UpstreamGatewayError,
)
from .retry import Attemptable, RetrySpec, retry_with_validation, run_attemptable

__all__ = [
    "setup_logger",
    "configure_package_loggers",
    "CampaignInsightsError",
    "ConfigurationError",
    "FeedError",
    "NoCandidatesError",
    "RetryValidationError",
    "GenerationTransportError",
    "SchemaValidationError",
    "UpstreamGatewayError",
    "Attemptable",
    "RetrySpec",
    "retry_with_validation",
    "run_attemptable",
]
