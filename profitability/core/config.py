"""
config.py - 애플리케이션 설정

환경변수(.env 포함) 기반 설정 관리
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError


# 패키지 경로
PACKAGE_DIR = Path(__file__).parent.parent
DATA_DIR = PACKAGE_DIR / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "default_catalog.json"

# 외부 클라이언트(폼)가 호출하는 엔드포인트
ENDPOINT = "/api/v1/profitability-calculator"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppConfig:
    """애플리케이션 설정"""

    # --- 요율표 ---
    catalog_path: Optional[Path] = None     # None이면 번들 기본 요율표
    strict_catalog: bool = False            # 커버리지 누락 시 기동 거부

    # --- 로깅 ---
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경변수에서 설정 로드"""
        load_dotenv()
        catalog_path = os.getenv("PROFITABILITY_CATALOG_PATH", "").strip()
        config = cls(
            catalog_path=Path(catalog_path) if catalog_path else None,
            strict_catalog=_env_flag("PROFITABILITY_STRICT_CATALOG"),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            log_json=_env_flag("LOG_JSON"),
        )
        if config.log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unsupported log level: {config.log_level}",
                config_key="LOG_LEVEL",
            )
        return config

    @property
    def resolved_catalog_path(self) -> Path:
        return self.catalog_path or DEFAULT_CATALOG_PATH

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> List[str]:
        """설정 유효성 검사"""
        errors = []

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL은 {', '.join(LOG_LEVELS)} 중 하나여야 합니다.")

        if not self.resolved_catalog_path.is_file():
            errors.append(f"요율표 파일을 찾을 수 없습니다: {self.resolved_catalog_path}")

        return errors
