"""
커스텀 예외 클래스

Profitability Calculator에서 사용하는 모든 커스텀 예외를 정의
"""

from typing import Optional, Dict, Any


class FaultKind:
    """장애 원인 구분 (응답 계약용)"""
    CLIENT = "client"                   # 입력값 오류 - 호출자가 수정
    CONFIGURATION = "configuration"     # 요율표 누락 - 운영자가 수정
    INTERNAL = "internal"               # 예상치 못한 오류


class ProfitabilityError(Exception):
    """기본 예외 클래스"""

    fault = FaultKind.INTERNAL

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        """
        Args:
            message: 에러 메시지
            error_code: 에러 코드
            details: 추가 상세 정보
            cause: 원인 예외
        """
        self.message = message
        self.error_code = error_code or self._default_code()
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def _default_code(self) -> str:
        return "PC_UNKNOWN"

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ValidationError(ProfitabilityError):
    """요청 검증 오류 (클라이언트 책임)"""

    fault = FaultKind.CLIENT

    def __init__(
        self,
        message: str,
        field: str = None,
        value: Any = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        details = kwargs.pop("details", {})
        details["field"] = field
        details["value"] = str(value)[:100]  # 값 길이 제한
        super().__init__(message, details=details, **kwargs)

    def _default_code(self) -> str:
        return "PC_VALIDATION"


class CalculationError(ProfitabilityError):
    """요율표에 해당 조합 규칙이 없음 (설정 책임)"""

    fault = FaultKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        component: str = None,
        key: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self.component = component
        self.key = dict(key or {})
        details = kwargs.pop("details", {})
        details["component"] = component
        details["key"] = {k: str(v) for k, v in self.key.items()}
        super().__init__(message, details=details, **kwargs)

    def _default_code(self) -> str:
        return "PC_CALCULATION"


class CatalogLoadError(ProfitabilityError):
    """요율 데이터 로드 실패 (기동 시 치명적)"""

    fault = FaultKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        source: str = None,
        section: str = None,
        **kwargs
    ):
        self.source = source
        self.section = section
        details = kwargs.pop("details", {})
        details["source"] = source
        details["section"] = section
        super().__init__(message, details=details, **kwargs)

    def _default_code(self) -> str:
        return "PC_CATALOG_LOAD"


class ConfigurationError(ProfitabilityError):
    """설정 오류"""

    fault = FaultKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        config_key: str = None,
        **kwargs
    ):
        self.config_key = config_key
        details = kwargs.pop("details", {})
        details["config_key"] = config_key
        super().__init__(message, details=details, **kwargs)

    def _default_code(self) -> str:
        return "PC_CONFIG"


# 에러 코드 상수
class ErrorCodes:
    """에러 코드 상수"""

    # 일반
    UNKNOWN = "PC_UNKNOWN"
    INTERNAL = "PC_INTERNAL"
    CONFIG = "PC_CONFIG"

    # 요청 검증
    VALIDATION = "PC_VALIDATION"
    MISSING_FIELD = "PC_MISSING_FIELD"
    UNKNOWN_VALUE = "PC_UNKNOWN_VALUE"
    INVALID_NUMBER = "PC_INVALID_NUMBER"
    NEGATIVE_VALUE = "PC_NEGATIVE_VALUE"
    PRECISION = "PC_PRECISION"
    OUT_OF_RANGE = "PC_OUT_OF_RANGE"

    # 계산
    CALCULATION = "PC_CALCULATION"

    # 요율표
    CATALOG_LOAD = "PC_CATALOG_LOAD"
    CATALOG_PARSE = "PC_CATALOG_PARSE"
    CATALOG_BANDS = "PC_CATALOG_BANDS"
    CATALOG_GAPS = "PC_CATALOG_GAPS"
