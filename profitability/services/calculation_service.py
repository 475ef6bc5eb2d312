"""
calculation_service.py - 외부 클라이언트가 호출하는 경계

검증 -> 계산 -> 응답 계약 변환. 내부 예외를 응답으로 바꾸는 유일한 지점.
요청별 가변 상태를 두지 않으므로 여러 스레드에서 동시에 호출해도 된다.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from ..core.config import AppConfig
from ..core.error_handler import ErrorHandler, ErrorReport
from ..core.logging import track
from ..domain.catalog import RateCatalog
from ..domain.logic import FeeCalculationEngine
from ..domain.models import FeeBreakdown
from ..domain.validation import RequestValidator
from .catalog_provider import CatalogProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceResponse:
    """응답 계약

    성공: ok=True, data=FeeBreakdown
    실패: ok=False, error=ErrorReport (kind: client / configuration / internal)
    """
    ok: bool
    status_code: int
    data: Optional[FeeBreakdown] = None
    error: Optional[ErrorReport] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return "success" if self.ok else self.error.kind

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return self.data.to_dict()
        return {"error": self.error.to_dict()}


class CalculationService:
    """수익성 계산 서비스"""

    def __init__(
        self,
        catalog: Union[RateCatalog, CatalogProvider],
        validator: Optional[RequestValidator] = None,
        engine: Optional[FeeCalculationEngine] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """
        Args:
            catalog: 고정 요율표 또는 교체 가능한 CatalogProvider
        """
        if isinstance(catalog, CatalogProvider):
            self.provider = catalog
        else:
            self.provider = CatalogProvider(catalog)
        self.validator = validator or RequestValidator()
        self.engine = engine or FeeCalculationEngine()
        self.error_handler = error_handler or ErrorHandler(logger)

    @classmethod
    def from_config(cls, config: AppConfig) -> "CalculationService":
        """설정 기반 생성 (요율표가 잘못되면 CatalogLoadError로 기동 거부)"""
        provider = CatalogProvider.from_path(
            config.resolved_catalog_path, strict=config.strict_catalog
        )
        return cls(provider)

    def handle(self, raw: Mapping[str, Any]) -> ServiceResponse:
        """계산 요청 처리

        Args:
            raw: 외부 요청 객체 (productCategory, productSize, ...)

        Returns:
            ServiceResponse - 예외를 밖으로 던지지 않는다
        """
        # 요청 하나는 요율표 스냅샷 하나만 본다
        catalog = self.provider.current
        try:
            with track(logger, "fee_calculation", catalog_version=catalog.version):
                request = self.validator.validate(raw, catalog)
                breakdown = self.engine.calculate(request, catalog)
        except Exception as e:
            # ProfitabilityError는 분류된 응답으로, 그 외는 internal(500)로 기록
            return self._error_response(e, raw)

        logger.debug(
            f"Calculated fees for {request.product_category}: "
            f"total={breakdown.total_fees} net={breakdown.net_earnings}",
        )
        return ServiceResponse(
            ok=True,
            status_code=200,
            data=breakdown,
            meta={"catalogVersion": catalog.version, "currency": catalog.currency},
        )

    def _error_response(self, error: Exception, raw: Any) -> ServiceResponse:
        report = self.error_handler.handle(error, context={"request": _summarize(raw)})
        return ServiceResponse(ok=False, status_code=report.status_code, error=report)


def _summarize(raw: Any) -> Any:
    """로그용 요청 요약"""
    if isinstance(raw, Mapping):
        return {str(k): str(v)[:60] for k, v in raw.items()}
    return type(raw).__name__
