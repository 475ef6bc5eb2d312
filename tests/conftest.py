"""공용 픽스처 - 테스트용 요율 데이터"""

import copy
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitability.domain.catalog import build_catalog


SCENARIO_DATA = {
    "version": "test-1",
    "currency": "INR",
    "categories": [
        "Books",
        "Automotive Vehicles",
        "Baby - Diapers",
        "Baby - Strollers",     # 마감 수수료 없음
        "Baby - Hardlines",     # 판매 수수료 없음
    ],
    "referral_fees": {
        "Books": {"rate": "0.07"},
        "Automotive Vehicles": {"rate": "0.05"},
        "Baby - Diapers": [
            {"min": 0, "max": 300, "rate": "0.04"},
            {"min": 300, "max": None, "rate": "0.085"},
        ],
        "Baby - Strollers": {"rate": "0.075"},
    },
    "weight_handling_fees": [
        {"location": "Local", "shipping_mode": "Easy Ship", "bands": [
            {"min": 0, "max": "0.5", "fee": 20},
            {"min": "0.5", "max": 2, "fee": 35},
            {"min": 2, "max": None, "fee": 60},
        ]},
        {"location": "Local", "shipping_mode": "FBA", "bands": [
            {"min": 0, "max": None, "fee": "12.345"},
        ]},
    ],
    "closing_fees": {
        "Books": [
            {"min": 0, "max": 1000, "fee": 10},
            {"min": 1000, "max": None, "fee": 20},
        ],
        "Automotive Vehicles": [
            {"min": 0, "max": None, "fee": 5},
        ],
        "Baby - Diapers": [
            {"min": 0, "max": None, "fee": 6},
        ],
        "Baby - Hardlines": [
            {"min": 0, "max": None, "fee": 6},
        ],
    },
    "pick_and_pack_fees": [
        {"product_size": "Standard", "shipping_mode": "Easy Ship", "fee": 15},
        {"product_size": "Standard", "shipping_mode": "FBA", "fee": 14},
    ],
}


def scenario_data() -> dict:
    """수정해도 안전한 사본"""
    return copy.deepcopy(SCENARIO_DATA)


def books_request(**overrides) -> dict:
    """Books / Standard / Local / Easy Ship / Standard, 500.00, 0.3kg"""
    payload = {
        "productCategory": "Books",
        "productSize": "Standard",
        "location": "Local",
        "shippingMode": "Easy Ship",
        "serviceLevel": "Standard",
        "sellingPrice": 500.00,
        "weight": 0.3,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def catalog_data():
    return scenario_data()


@pytest.fixture
def catalog():
    return build_catalog(scenario_data(), source="scenario")
