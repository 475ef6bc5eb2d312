"""
validation.py - 계산 요청 검증

검사 순서 (첫 번째 실패 필드에서 중단):
    1. productCategory, productSize, location, shippingMode, serviceLevel
       - 존재, 비어있지 않음, 요율표/Enum에 있는 값
    2. sellingPrice - 숫자, 유한, 0 이상, 소수 둘째 자리까지, MAX_AMOUNT 미만
    3. weight       - 숫자, 유한, 0 이상

검증은 원자적: 전부 통과하면 PricingRequest, 아니면 ValidationError.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..core.exceptions import ErrorCodes, ValidationError
from .catalog import RateCatalog
from .models import (
    Location,
    MINOR_UNIT,
    PricingRequest,
    ProductSize,
    ServiceLevel,
    ShippingMode,
    ZERO,
)


# (계약 필드명, 도메인 필드명, Enum) - 순서가 곧 검사 순서
ENUM_FIELDS = (
    ("productSize", "product_size", ProductSize),
    ("location", "location", Location),
    ("shippingMode", "shipping_mode", ShippingMode),
    ("serviceLevel", "service_level", ServiceLevel),
)

FIELD_ORDER = (
    "productCategory",
    "productSize",
    "location",
    "shippingMode",
    "serviceLevel",
    "sellingPrice",
    "weight",
)

_MISSING = object()

# 판매가 상한 (이 값 이상은 거부 - 금액 계산은 Decimal 기본 정밀도 28자리)
MAX_AMOUNT = Decimal("1E+15")


def _get(raw: Mapping[str, Any], wire_name: str, domain_name: str) -> Any:
    """camelCase 계약 이름 우선, 없으면 snake_case"""
    if wire_name in raw:
        return raw[wire_name]
    return raw.get(domain_name, _MISSING)


def _is_blank(value: Any) -> bool:
    return value is _MISSING or value is None or (isinstance(value, str) and not value.strip())


class RequestValidator:
    """계산 요청 검증기 (상태 없음)"""

    def validate(self, raw: Mapping[str, Any], catalog: RateCatalog) -> PricingRequest:
        """
        Args:
            raw: 외부 요청 객체 (dict)
            catalog: 카테고리 목록을 제공하는 요율표

        Returns:
            PricingRequest

        Raises:
            ValidationError: 첫 번째로 발견된 잘못된 필드
        """
        if not isinstance(raw, Mapping):
            raise ValidationError(
                "Request body must be an object",
                field=None,
                value=type(raw).__name__,
            )

        category = self._category(raw, catalog)
        enums = {
            domain_name: self._enum(raw, wire_name, domain_name, enum_cls)
            for wire_name, domain_name, enum_cls in ENUM_FIELDS
        }
        selling_price = self._non_negative(raw, "sellingPrice", "selling_price", money=True)
        weight = self._non_negative(raw, "weight", "weight")

        return PricingRequest(
            product_category=category,
            selling_price=selling_price,
            weight=weight,
            **enums,
        )

    def _category(self, raw: Mapping[str, Any], catalog: RateCatalog) -> str:
        value = _get(raw, "productCategory", "product_category")
        if _is_blank(value):
            raise ValidationError(
                "productCategory is required",
                field="productCategory",
                value=None if value is _MISSING else value,
                error_code=ErrorCodes.MISSING_FIELD,
            )
        if not isinstance(value, str) or not catalog.has_category(value):
            raise ValidationError(
                f"Unknown productCategory: {value!r}",
                field="productCategory",
                value=value,
                error_code=ErrorCodes.UNKNOWN_VALUE,
                details={"allowed": list(catalog.categories)},
            )
        return value

    def _enum(self, raw: Mapping[str, Any], wire_name: str, domain_name: str, enum_cls):
        value = _get(raw, wire_name, domain_name)
        if _is_blank(value):
            raise ValidationError(
                f"{wire_name} is required",
                field=wire_name,
                value=None if value is _MISSING else value,
                error_code=ErrorCodes.MISSING_FIELD,
            )
        member = enum_cls.parse(value)
        if member is None:
            raise ValidationError(
                f"Unknown {wire_name}: {value!r}",
                field=wire_name,
                value=value,
                error_code=ErrorCodes.UNKNOWN_VALUE,
                details={"allowed": list(enum_cls.values())},
            )
        return member

    def _non_negative(
        self, raw: Mapping[str, Any], wire_name: str, domain_name: str, money: bool = False
    ) -> Decimal:
        value = _get(raw, wire_name, domain_name)
        if _is_blank(value):
            raise ValidationError(
                f"{wire_name} is required",
                field=wire_name,
                value=None,
                error_code=ErrorCodes.MISSING_FIELD,
            )

        number = self._to_decimal(value)
        if number is None:
            raise ValidationError(
                f"{wire_name} must be a finite number",
                field=wire_name,
                value=value,
                error_code=ErrorCodes.INVALID_NUMBER,
            )
        if number < ZERO:
            raise ValidationError(
                f"{wire_name} must be greater than or equal to 0",
                field=wire_name,
                value=value,
                error_code=ErrorCodes.NEGATIVE_VALUE,
            )
        if money and number >= MAX_AMOUNT:
            raise ValidationError(
                f"{wire_name} must be less than {MAX_AMOUNT:f}",
                field=wire_name,
                value=value,
                error_code=ErrorCodes.OUT_OF_RANGE,
            )
        if money and number.normalize().as_tuple().exponent < MINOR_UNIT.as_tuple().exponent:
            raise ValidationError(
                f"{wire_name} must have at most 2 decimal places",
                field=wire_name,
                value=value,
                error_code=ErrorCodes.PRECISION,
            )
        # -0 은 0 으로
        return number + ZERO

    @staticmethod
    def _to_decimal(value: Any) -> Optional[Decimal]:
        # bool은 int의 하위 타입이지만 숫자로 받지 않음
        if isinstance(value, bool):
            return None
        if not isinstance(value, (int, float, str, Decimal)):
            return None
        try:
            number = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
        except InvalidOperation:
            return None
        if not number.is_finite():
            return None
        return number
