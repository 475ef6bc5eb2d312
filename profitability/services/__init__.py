"""서비스 모듈"""
from .catalog_provider import CatalogProvider
from .calculation_service import CalculationService, ServiceResponse

__all__ = [
    "CatalogProvider",
    "CalculationService",
    "ServiceResponse",
]
