"""
catalog.py - 요율표 (RateCatalog) 및 로더

요율표는 기동 시 한 번 만들어지고 이후 변경되지 않는다.
조회 결과가 None이면 "규칙 없음" - 절대 0원으로 대체하지 않는다.

요율 데이터 형식 (JSON):
    {
      "version": "2024-10",
      "currency": "INR",
      "categories": ["Books", ...],
      "referral_fees": {"Books": {"rate": 0.07}
                        | [{"min": 0, "max": 250, "rate": 0.03}, ...]},
      "weight_handling_fees": [{"location": "Local", "shipping_mode": "Easy Ship",
                                "bands": [{"min": 0, "max": 0.5, "fee": 20}, ...]}],
      "closing_fees": {"Books": [{"min": 0, "max": 1000, "fee": 10}, ...]},
      "pick_and_pack_fees": [{"product_size": "Standard", "shipping_mode": "FBA",
                              "fee": 14}]
    }
마지막 구간의 "max"는 null (상한 없음).
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..core.config import DEFAULT_CATALOG_PATH
from ..core.exceptions import CatalogLoadError, ErrorCodes
from .models import (
    Band,
    BandTable,
    Location,
    ProductSize,
    ReferralRule,
    ShippingMode,
    ZERO,
)

logger = logging.getLogger(__name__)

ONE = Decimal("1")


@dataclass(frozen=True)
class RateCatalog:
    """버전이 있는 불변 요율표"""
    version: str
    currency: str
    categories: Tuple[str, ...]
    referral_rules: Mapping[str, ReferralRule]
    weight_handling: Mapping[Tuple[Location, ShippingMode], BandTable]
    closing_fees: Mapping[str, BandTable]
    pick_and_pack: Mapping[Tuple[ProductSize, ShippingMode], Decimal]

    def has_category(self, name: str) -> bool:
        return name in self.categories

    def lookup_referral_rule(self, category: str) -> Optional[ReferralRule]:
        return self.referral_rules.get(category)

    def lookup_weight_band(
        self, location: Location, shipping_mode: ShippingMode, weight: Decimal
    ) -> Optional[Decimal]:
        table = self.weight_handling.get((location, shipping_mode))
        if table is None:
            return None
        return table.lookup(weight)

    def lookup_closing_band(self, price: Decimal, category: str) -> Optional[Decimal]:
        table = self.closing_fees.get(category)
        if table is None:
            return None
        return table.lookup(price)

    def lookup_pick_pack(
        self, size: ProductSize, shipping_mode: ShippingMode
    ) -> Optional[Decimal]:
        return self.pick_and_pack.get((size, shipping_mode))

    def coverage_gaps(self) -> List[str]:
        """규칙이 없는 키 조합 목록 (운영자 확인용)"""
        gaps = []
        for category in self.categories:
            if category not in self.referral_rules:
                gaps.append(f"referral_fees: {category}")
            if category not in self.closing_fees:
                gaps.append(f"closing_fees: {category}")
        for location in Location:
            for mode in ShippingMode:
                if (location, mode) not in self.weight_handling:
                    gaps.append(f"weight_handling_fees: {location.value} / {mode.value}")
        for size in ProductSize:
            for mode in ShippingMode:
                if (size, mode) not in self.pick_and_pack:
                    gaps.append(f"pick_and_pack_fees: {size.value} / {mode.value}")
        return gaps


# ============================================================
# 로더
# ============================================================

class _CatalogParser:
    """원시 dict -> RateCatalog (검증 포함)"""

    def __init__(self, data: Any, source: str):
        self.data = data
        self.source = source

    def fail(self, message: str, section: str = None, code: str = ErrorCodes.CATALOG_PARSE):
        raise CatalogLoadError(message, source=self.source, section=section, error_code=code)

    def section(self, name: str, expected: type) -> Any:
        if name not in self.data:
            self.fail(f"Missing required section '{name}'", section=name)
        value = self.data[name]
        if not isinstance(value, expected):
            self.fail(f"Section '{name}' must be a {expected.__name__}", section=name)
        return value

    def amount(self, raw: Any, section: str, what: str) -> Decimal:
        if isinstance(raw, bool) or raw is None:
            self.fail(f"{what} must be a number", section=section)
        try:
            value = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            self.fail(f"{what} must be a number, got {raw!r}", section=section)
        if not value.is_finite():
            self.fail(f"{what} must be finite", section=section)
        if value < ZERO:
            self.fail(f"{what} must not be negative, got {value}", section=section)
        return value

    def rate(self, raw: Any, section: str, what: str) -> Decimal:
        value = self.amount(raw, section, what)
        if value > ONE:
            self.fail(f"{what} must be a fraction between 0 and 1, got {value}", section=section)
        return value

    def enum(self, enum_cls, raw: Any, section: str):
        member = enum_cls.parse(raw)
        if member is None:
            self.fail(
                f"Unknown {enum_cls.__name__} {raw!r}; expected one of {list(enum_cls.values())}",
                section=section,
            )
        return member

    def band_table(self, raw_bands: Any, section: str, value_key: str) -> BandTable:
        """구간 목록 검증: 0에서 시작, 연속, 겹침 없음, 마지막만 상한 없음"""
        if not isinstance(raw_bands, list) or not raw_bands:
            self.fail("Bands must be a non-empty list", section=section, code=ErrorCodes.CATALOG_BANDS)

        bands = []
        expected_lower = ZERO
        for i, raw in enumerate(raw_bands):
            if not isinstance(raw, dict):
                self.fail(f"Band #{i} must be an object", section=section, code=ErrorCodes.CATALOG_BANDS)
            if value_key not in raw:
                self.fail(f"Band #{i} is missing '{value_key}'", section=section, code=ErrorCodes.CATALOG_BANDS)

            lower = self.amount(raw.get("min"), section, f"Band #{i} min")
            upper_raw = raw.get("max")
            upper = None if upper_raw is None else self.amount(upper_raw, section, f"Band #{i} max")
            if value_key == "rate":
                value = self.rate(raw[value_key], section, f"Band #{i} rate")
            else:
                value = self.amount(raw[value_key], section, f"Band #{i} {value_key}")

            if lower != expected_lower:
                kind = "overlaps the previous band" if lower < expected_lower else "leaves a gap"
                self.fail(
                    f"Band #{i} starts at {lower} and {kind} (expected {expected_lower})",
                    section=section, code=ErrorCodes.CATALOG_BANDS,
                )
            is_last = i == len(raw_bands) - 1
            if upper is None and not is_last:
                self.fail(f"Only the last band may be unbounded (band #{i})",
                          section=section, code=ErrorCodes.CATALOG_BANDS)
            if upper is not None and is_last:
                self.fail(f"The last band must be unbounded (max: null), got {upper}",
                          section=section, code=ErrorCodes.CATALOG_BANDS)
            if upper is not None and upper <= lower:
                self.fail(f"Band #{i} is empty or inverted: [{lower}, {upper})",
                          section=section, code=ErrorCodes.CATALOG_BANDS)

            bands.append(Band(lower=lower, upper=upper, value=value))
            expected_lower = upper

        return BandTable(tuple(bands))

    def parse(self) -> RateCatalog:
        if not isinstance(self.data, dict):
            self.fail("Rate data must be a JSON object")

        version = str(self.data.get("version", "unversioned"))
        currency = str(self.data.get("currency", "INR"))

        # 카테고리
        raw_categories = self.section("categories", list)
        categories = []
        for name in raw_categories:
            if not isinstance(name, str) or not name.strip():
                self.fail(f"Category names must be non-empty strings, got {name!r}", section="categories")
            if name in categories:
                self.fail(f"Duplicate category {name!r}", section="categories")
            categories.append(name)
        known = set(categories)

        # 판매 수수료
        referral_rules = {}
        for category, raw in self.section("referral_fees", dict).items():
            section = f"referral_fees.{category}"
            if category not in known:
                self.fail(f"Category {category!r} is not declared in 'categories'", section=section)
            if isinstance(raw, dict) and "rate" in raw:
                rate = self.rate(raw["rate"], section, "rate")
                table = BandTable((Band(lower=ZERO, upper=None, value=rate),))
            else:
                table = self.band_table(raw, section, "rate")
            referral_rules[category] = ReferralRule(rates=table)

        # 무게 처리 수수료
        weight_handling = {}
        for i, raw in enumerate(self.section("weight_handling_fees", list)):
            section = f"weight_handling_fees[{i}]"
            if not isinstance(raw, dict):
                self.fail("Entry must be an object", section=section)
            key = (
                self.enum(Location, raw.get("location"), section),
                self.enum(ShippingMode, raw.get("shipping_mode"), section),
            )
            if key in weight_handling:
                self.fail(f"Duplicate weight bands for {key[0].value} / {key[1].value}", section=section)
            table = self.band_table(raw.get("bands"), section, "fee")
            if not table.is_non_decreasing():
                logger.warning(
                    f"Weight bands for {key[0].value} / {key[1].value} decrease with weight",
                    extra={"context": {"source": self.source, "section": section}},
                )
            weight_handling[key] = table

        # 마감 수수료
        closing_fees = {}
        for category, raw in self.section("closing_fees", dict).items():
            section = f"closing_fees.{category}"
            if category not in known:
                self.fail(f"Category {category!r} is not declared in 'categories'", section=section)
            closing_fees[category] = self.band_table(raw, section, "fee")

        # 픽앤팩 수수료
        pick_and_pack = {}
        for i, raw in enumerate(self.section("pick_and_pack_fees", list)):
            section = f"pick_and_pack_fees[{i}]"
            if not isinstance(raw, dict):
                self.fail("Entry must be an object", section=section)
            key = (
                self.enum(ProductSize, raw.get("product_size"), section),
                self.enum(ShippingMode, raw.get("shipping_mode"), section),
            )
            if key in pick_and_pack:
                self.fail(f"Duplicate pick & pack fee for {key[0].value} / {key[1].value}", section=section)
            pick_and_pack[key] = self.amount(raw.get("fee"), section, "fee")

        return RateCatalog(
            version=version,
            currency=currency,
            categories=tuple(categories),
            referral_rules=MappingProxyType(referral_rules),
            weight_handling=MappingProxyType(weight_handling),
            closing_fees=MappingProxyType(closing_fees),
            pick_and_pack=MappingProxyType(pick_and_pack),
        )


def build_catalog(data: Dict[str, Any], source: str = "<memory>", strict: bool = False) -> RateCatalog:
    """원시 요율 데이터로 RateCatalog 생성

    Args:
        data: JSON과 같은 구조의 dict
        source: 에러 메시지용 출처
        strict: True면 규칙 누락 조합이 하나라도 있을 때 거부

    Raises:
        CatalogLoadError: 데이터가 잘못된 경우
    """
    catalog = _CatalogParser(data, source).parse()

    gaps = catalog.coverage_gaps()
    if gaps and strict:
        raise CatalogLoadError(
            f"Rate catalog has {len(gaps)} uncovered combination(s)",
            source=source,
            error_code=ErrorCodes.CATALOG_GAPS,
            details={"gaps": gaps},
        )
    for gap in gaps:
        logger.warning(f"Rate catalog gap: {gap}", extra={"context": {"source": source}})

    logger.info(
        f"Loaded rate catalog {catalog.version} ({len(catalog.categories)} categories) from {source}"
    )
    return catalog


def load_catalog(path: Union[str, Path], strict: bool = False) -> RateCatalog:
    """JSON 파일에서 요율표 로드"""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f, parse_float=Decimal)
    except OSError as e:
        raise CatalogLoadError(
            f"Cannot read rate file: {e}", source=str(path), cause=e
        ) from e
    except json.JSONDecodeError as e:
        raise CatalogLoadError(
            f"Rate file is not valid JSON: {e}",
            source=str(path),
            error_code=ErrorCodes.CATALOG_PARSE,
            cause=e,
        ) from e
    return build_catalog(data, source=str(path), strict=strict)


def load_default_catalog(strict: bool = False) -> RateCatalog:
    """패키지에 포함된 기본 요율표 로드"""
    return load_catalog(DEFAULT_CATALOG_PATH, strict=strict)
