"""도메인 모듈 - 순수 비즈니스 로직"""
from .models import (
    Band,
    BandTable,
    FeeBreakdown,
    FeeComponent,
    Location,
    PricingRequest,
    ProductSize,
    ReferralRule,
    ServiceLevel,
    ShippingMode,
    round_money,
)
from .catalog import RateCatalog, build_catalog, load_catalog, load_default_catalog
from .validation import RequestValidator
from .logic import FeeCalculationEngine

__all__ = [
    # 모델
    "Band",
    "BandTable",
    "FeeBreakdown",
    "FeeComponent",
    "Location",
    "PricingRequest",
    "ProductSize",
    "ReferralRule",
    "ServiceLevel",
    "ShippingMode",
    "round_money",
    # 요율표
    "RateCatalog",
    "build_catalog",
    "load_catalog",
    "load_default_catalog",
    # 로직
    "RequestValidator",
    "FeeCalculationEngine",
]
