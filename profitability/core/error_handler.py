"""
에러 핸들러

예외를 장애 종류(클라이언트/설정/내부)로 분류하고 로깅한다.
요청 간 공유되는 가변 상태를 두지 않는다.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import (
    ErrorCodes,
    FaultKind,
    ProfitabilityError,
)


# 장애 종류별 상태 코드
STATUS_CODES = {
    FaultKind.CLIENT: 422,
    FaultKind.CONFIGURATION: 500,
    FaultKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class ErrorReport:
    """분류된 에러 정보"""
    kind: str
    status_code: int
    error_code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ErrorHandler:
    """에러 분류 및 로깅"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def handle(
        self,
        error: Exception,
        context: Dict[str, Any] = None
    ) -> ErrorReport:
        """
        에러 처리

        Args:
            error: 발생한 예외
            context: 에러 컨텍스트

        Returns:
            응답 계약으로 변환 가능한 ErrorReport
        """
        context = context or {}
        report = self.classify(error)
        self._log_error(error, report, context)
        return report

    def classify(self, error: Exception) -> ErrorReport:
        """예외 -> ErrorReport"""
        if isinstance(error, ProfitabilityError):
            kind = error.fault
            return ErrorReport(
                kind=kind,
                status_code=STATUS_CODES[kind],
                error_code=error.error_code,
                message=error.message,
                details=dict(error.details),
            )

        # 내부 정보는 응답에 노출하지 않음
        return ErrorReport(
            kind=FaultKind.INTERNAL,
            status_code=STATUS_CODES[FaultKind.INTERNAL],
            error_code=ErrorCodes.INTERNAL,
            message="An unexpected error occurred",
        )

    def _log_error(
        self,
        error: Exception,
        report: ErrorReport,
        context: Dict[str, Any]
    ):
        """에러 로깅"""
        extra = {"context": {**report.details, **context}}
        if report.kind == FaultKind.CLIENT:
            self.logger.warning(f"[{report.error_code}] {report.message}", extra=extra)
        elif report.kind == FaultKind.CONFIGURATION:
            self.logger.error(f"[{report.error_code}] {report.message}", extra=extra)
        else:
            self.logger.error(
                f"Unhandled error: {error}",
                extra=extra,
                exc_info=error,
            )
