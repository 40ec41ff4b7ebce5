"""
Service layer package for remote_image.
This package contains the services that sit between controllers and the core
layer: the caching HTTP session and settings management.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.models import FetchResult


class ImageFetcherInterface(ABC):
    """带缓存信息的图像获取接口定义"""

    @abstractmethod
    async def fetch_with_cache_info(self, url: str, skip_cache: bool = False) -> FetchResult:
        """获取数据，并报告是否来自本地缓存"""
        pass

    @abstractmethod
    def cache_lookup(self, url: str) -> Optional[bytes]:
        """同步查询缓存"""
        pass


class ConfigServiceInterface(ABC):
    """配置服务接口定义"""

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """获取配置项"""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: Any):
        """设置配置项"""
        pass

    @abstractmethod
    def save_settings(self):
        """保存配置项"""
        pass


from .session import CachingSession, shared_session, reset_shared_session
from .config_service import ConfigService

ImageFetcherInterface.register(CachingSession)
ConfigServiceInterface.register(ConfigService)

__all__ = [
    'ImageFetcherInterface',
    'ConfigServiceInterface',
    'CachingSession',
    'shared_session',
    'reset_shared_session',
    'ConfigService',
]
