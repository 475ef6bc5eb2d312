"""
models.py - 도메인 모델

순수 파이썬 데이터 클래스. 외부 의존성 없음.
금액은 모두 Decimal, 반올림은 round_money() 한 곳에서만.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Any, Dict, Optional, Tuple


MINOR_UNIT = Decimal("0.01")    # 통화 최소 단위 (₹ 0.01)
ZERO = Decimal("0")


def round_money(amount: Decimal) -> Decimal:
    """최소 단위(소수 둘째 자리)로 반올림 - ROUND_HALF_EVEN"""
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_EVEN)


def _compact(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


class WireEnum(Enum):
    """외부 계약 문자열을 값으로 가지는 Enum"""

    @classmethod
    def parse(cls, value: Any) -> Optional["WireEnum"]:
        """계약 문자열 -> 멤버. 모르는 값이면 None.

        정확히 일치하는 값을 먼저 찾고, 그 다음 공백/기호를 뺀
        표기("EasyShip", "Heavy&Bulky")를 허용한다.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        for member in cls:
            if member.value == value:
                return member
        compact = _compact(value)
        if not compact:
            return None
        for member in cls:
            if _compact(member.value) == compact:
                return member
        return None

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


class ProductSize(WireEnum):
    """상품 사이즈 등급"""
    STANDARD = "Standard"
    HEAVY_BULKY = "Heavy & Bulky"


class Location(WireEnum):
    """배송 권역"""
    LOCAL = "Local"
    REGIONAL = "Regional"
    NATIONAL = "National"
    IXD = "IXD"


class ShippingMode(WireEnum):
    """배송 방식"""
    EASY_SHIP = "Easy Ship"
    FBA = "FBA"
    SELF_SHIP = "Self Ship"


class ServiceLevel(WireEnum):
    """서비스 등급 (현재 요율에 영향 없음 - 확장용으로 검증만)"""
    PREMIUM = "Premium"
    ADVANCED = "Advanced"
    STANDARD = "Standard"
    BASIC = "Basic"


class FeeComponent(Enum):
    """수수료 항목 (평가 순서대로)"""
    REFERRAL = "referralFee"
    WEIGHT_HANDLING = "weightHandlingFee"
    CLOSING = "closingFee"
    PICK_AND_PACK = "pickAndPackFee"


@dataclass(frozen=True)
class Band:
    """반개구간 [lower, upper) - upper가 None이면 상한 없음"""
    lower: Decimal
    upper: Optional[Decimal]
    value: Decimal

    def contains(self, x: Decimal) -> bool:
        if x < self.lower:
            return False
        return self.upper is None or x < self.upper


@dataclass(frozen=True)
class BandTable:
    """하한 기준 정렬된 구간 테이블 (이진 탐색 조회)

    구간 연속성(0부터 시작, 빈틈/겹침 없음)은 로더가 보장한다.
    """
    bands: Tuple[Band, ...]
    _lowers: Tuple[Decimal, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_lowers", tuple(b.lower for b in self.bands))

    def lookup(self, x: Decimal) -> Optional[Decimal]:
        """x가 속한 구간의 값. 어느 구간에도 없으면 None"""
        index = bisect_right(self._lowers, x) - 1
        if index < 0:
            return None
        band = self.bands[index]
        return band.value if band.contains(x) else None

    def is_non_decreasing(self) -> bool:
        values = [b.value for b in self.bands]
        return all(a <= b for a, b in zip(values, values[1:]))

    def __len__(self) -> int:
        return len(self.bands)


@dataclass(frozen=True)
class ReferralRule:
    """카테고리별 판매 수수료율 (단일 요율 또는 판매가 구간별 요율)"""
    rates: BandTable

    @property
    def is_flat(self) -> bool:
        return len(self.rates) == 1

    def rate_for(self, price: Decimal) -> Optional[Decimal]:
        return self.rates.lookup(price)


@dataclass(frozen=True)
class PricingRequest:
    """검증이 끝난 계산 요청"""
    product_category: str
    product_size: ProductSize
    location: Location
    shipping_mode: ShippingMode
    service_level: ServiceLevel
    selling_price: Decimal          # 판매가 (₹)
    weight: Decimal                 # 무게 (kg)


@dataclass(frozen=True)
class FeeBreakdown:
    """수수료 계산 결과"""
    referral_fee: Decimal
    weight_handling_fee: Decimal
    closing_fee: Decimal
    pick_and_pack_fee: Decimal
    total_fees: Decimal
    net_earnings: Decimal           # 음수 가능 (적자)
    catalog_version: str = ""

    @property
    def is_loss(self) -> bool:
        return self.net_earnings < ZERO

    def components(self) -> Dict[FeeComponent, Decimal]:
        return {
            FeeComponent.REFERRAL: self.referral_fee,
            FeeComponent.WEIGHT_HANDLING: self.weight_handling_fee,
            FeeComponent.CLOSING: self.closing_fee,
            FeeComponent.PICK_AND_PACK: self.pick_and_pack_fee,
        }

    def to_dict(self) -> Dict[str, float]:
        """응답 계약 형태 (camelCase, 숫자)"""
        return {
            "referralFee": float(self.referral_fee),
            "weightHandlingFee": float(self.weight_handling_fee),
            "closingFee": float(self.closing_fee),
            "pickAndPackFee": float(self.pick_and_pack_fee),
            "totalFees": float(self.total_fees),
            "netEarnings": float(self.net_earnings),
        }
