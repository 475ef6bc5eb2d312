"""Profitability Calculator - 마켓 판매 수수료 및 순수익 계산 엔진"""
from .core import (
    AppConfig,
    CalculationError,
    CatalogLoadError,
    ProfitabilityError,
    ValidationError,
)
from .domain import (
    FeeBreakdown,
    FeeCalculationEngine,
    PricingRequest,
    RateCatalog,
    RequestValidator,
    load_catalog,
    load_default_catalog,
)
from .services import CalculationService, CatalogProvider, ServiceResponse

__version__ = "1.0.0"

__all__ = [
    "AppConfig",
    "CalculationError",
    "CatalogLoadError",
    "ProfitabilityError",
    "ValidationError",
    "FeeBreakdown",
    "FeeCalculationEngine",
    "PricingRequest",
    "RateCatalog",
    "RequestValidator",
    "load_catalog",
    "load_default_catalog",
    "CalculationService",
    "CatalogProvider",
    "ServiceResponse",
]
