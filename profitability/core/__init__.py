"""코어 모듈"""
from .exceptions import (
    FaultKind,
    ProfitabilityError,
    ValidationError,
    CalculationError,
    CatalogLoadError,
    ConfigurationError,
    ErrorCodes,
)
from .error_handler import ErrorHandler, ErrorReport
from .config import AppConfig, DEFAULT_CATALOG_PATH, ENDPOINT
from .logging import setup_logger, track

__all__ = [
    # 예외
    "FaultKind",
    "ProfitabilityError",
    "ValidationError",
    "CalculationError",
    "CatalogLoadError",
    "ConfigurationError",
    "ErrorCodes",
    "ErrorHandler",
    "ErrorReport",
    # 설정
    "AppConfig",
    "DEFAULT_CATALOG_PATH",
    "ENDPOINT",
    "setup_logger",
    "track",
]
