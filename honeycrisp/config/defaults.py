from __future__ import annotations

from honeycrisp.config.schema import AppConfig
from honeycrisp.services.safety import SYSTEM_APP_SUPPORT


def default_config() -> AppConfig:
    return AppConfig(
        application_dirs=["/Applications", "~/Applications"],
        system_app_support=list(SYSTEM_APP_SUPPORT),
    )
