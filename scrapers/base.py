"""
Base Scraper
所有抓取器的抽象基类
"""
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar
import logging

import httpx

from config import FeedSettings, get_feed_settings


logger = logging.getLogger(__name__)

T = TypeVar("T")  # 泛型返回类型


class BaseScraper(ABC, Generic[T]):
    """
    抓取器抽象基类
    所有具体抓取器都需要继承此类并实现 fetch()
    """

    def __init__(
        self,
        settings: Optional[FeedSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_feed_settings()
        self._client = client
        self._owns_client = client is None

    @property
    @abstractmethod
    def name(self) -> str:
        """返回抓取器名称"""
        pass

    @abstractmethod
    async def fetch(self) -> List[T]:
        """
        抓取并解析

        Returns:
            结果列表
        """
        pass

    def _get_client(self) -> httpx.AsyncClient:
        """获取或创建 HTTP 客户端"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.request_timeout),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()

    async def close(self):
        """清理资源 (只关闭自己创建的客户端)"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _log_fetch(self, count: int):
        logger.info(f"[{self.name}] fetched {count} items")
