"""
logic.py - 핵심 비즈니스 로직 (FeeCalculationEngine)

외부 의존성 없는 순수 계산:
- 같은 요청 + 같은 요율표 = 항상 같은 결과
- 항목별 1회 반올림 (ROUND_HALF_EVEN), 합계는 재반올림 없음
- 규칙이 없으면 0원 처리하지 않고 CalculationError
"""

from decimal import Decimal

from ..core.exceptions import CalculationError
from .catalog import RateCatalog
from .models import (
    FeeBreakdown,
    FeeComponent,
    PricingRequest,
    round_money,
)


class FeeCalculationEngine:
    """마켓 판매 수수료 계산기

    평가 순서: 판매 수수료 -> 무게 처리 -> 마감 -> 픽앤팩.
    항목끼리는 독립적이며, 순서는 요율표 누락이 여러 개일 때
    어떤 항목을 먼저 보고할지만 결정한다.
    """

    def calculate(self, request: PricingRequest, catalog: RateCatalog) -> FeeBreakdown:
        """수수료 계산 실행

        Args:
            request: 검증된 계산 요청
            catalog: 요율표 스냅샷

        Returns:
            FeeBreakdown

        Raises:
            CalculationError: 요율표에 해당 조합의 규칙이 없는 경우
        """
        price = request.selling_price

        # 1. 판매 수수료 = 판매가 x 요율 (구간별 요율이면 판매가가 속한 구간)
        referral_fee = round_money(price * self._referral_rate(request, catalog))

        # 2. 무게 처리 수수료
        weight_fee = catalog.lookup_weight_band(request.location, request.shipping_mode, request.weight)
        if weight_fee is None:
            raise self._not_found(
                FeeComponent.WEIGHT_HANDLING,
                location=request.location.value,
                shippingMode=request.shipping_mode.value,
                weight=request.weight,
            )

        # 3. 마감 수수료
        closing_fee = catalog.lookup_closing_band(price, request.product_category)
        if closing_fee is None:
            raise self._not_found(
                FeeComponent.CLOSING,
                productCategory=request.product_category,
                sellingPrice=price,
            )

        # 4. 픽앤팩 수수료 (serviceLevel은 아직 요율에 반영하지 않음)
        pick_pack_fee = catalog.lookup_pick_pack(request.product_size, request.shipping_mode)
        if pick_pack_fee is None:
            raise self._not_found(
                FeeComponent.PICK_AND_PACK,
                productSize=request.product_size.value,
                shippingMode=request.shipping_mode.value,
            )

        weight_fee = round_money(weight_fee)
        closing_fee = round_money(closing_fee)
        pick_pack_fee = round_money(pick_pack_fee)

        # 5. 합계 / 순수익
        total_fees = referral_fee + weight_fee + closing_fee + pick_pack_fee
        net_earnings = price - total_fees

        return FeeBreakdown(
            referral_fee=referral_fee,
            weight_handling_fee=weight_fee,
            closing_fee=closing_fee,
            pick_and_pack_fee=pick_pack_fee,
            total_fees=total_fees,
            net_earnings=net_earnings,
            catalog_version=catalog.version,
        )

    def _referral_rate(self, request: PricingRequest, catalog: RateCatalog) -> Decimal:
        rule = catalog.lookup_referral_rule(request.product_category)
        rate = rule.rate_for(request.selling_price) if rule is not None else None
        if rate is None:
            raise self._not_found(
                FeeComponent.REFERRAL,
                productCategory=request.product_category,
                sellingPrice=request.selling_price,
            )
        return rate

    @staticmethod
    def _not_found(component: FeeComponent, **key) -> CalculationError:
        described = ", ".join(f"{k}={v}" for k, v in key.items())
        return CalculationError(
            f"No {component.value} rule configured for {described}",
            component=component.value,
            key=key,
        )
