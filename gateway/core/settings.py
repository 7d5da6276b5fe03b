"""Process-wide configuration, resolved once at startup.

`GatewaySettings.from_env()` is the only place that reads the environment;
the resulting object is passed explicitly into the app, the dispatcher and the
adapters.
"""

import os
from dataclasses import dataclass, field

from gateway.llm.provider_config import ProviderConfig
from gateway.retrieval.news.news_module import NewsModuleConfig


@dataclass(frozen=True)
class UploadLimits:
    """Multipart limits applied by `gateway.api.multimodal.upload_reader`."""

    max_files: int = 5
    max_file_bytes: int = 10 * 1024 * 1024
    max_field_bytes: int = 64 * 1024
    max_field_name_chars: int = 100
    max_fields: int = 20
    max_parts: int = 25


@dataclass(frozen=True)
class GatewaySettings:
    """Top-level settings threaded through the request pipeline."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    news: NewsModuleConfig = field(default_factory=NewsModuleConfig)
    uploads: UploadLimits = field(default_factory=UploadLimits)
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        return cls(
            provider=ProviderConfig.from_env(),
            news=NewsModuleConfig.from_env(),
            host=os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0",
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
