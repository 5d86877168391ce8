"""
Tests for stock status buckets and the fallback classification
"""
import pytest

from packages.domain.enrichment.fallback import generate_fallback_classification
from packages.domain.enrichment.schemas import ComplianceRisk, MarketDemand, StockStatus
from packages.domain.enrichment.stock_status import derive_stock_status


@pytest.mark.parametrize("availability,expected", [
    (0, StockStatus.OUT_OF_STOCK),
    (1, StockStatus.LOW_STOCK),
    (15, StockStatus.LOW_STOCK),
    (19, StockStatus.LOW_STOCK),
    (20, StockStatus.IN_STOCK),
    (5000, StockStatus.IN_STOCK),
])
def test_status_thresholds(availability, expected):
    assert derive_stock_status(availability) == expected


def test_every_count_maps_to_exactly_one_status():
    for availability in range(0, 100):
        status = derive_stock_status(availability)
        if availability == 0:
            assert status == StockStatus.OUT_OF_STOCK
        elif availability < 20:
            assert status == StockStatus.LOW_STOCK
        else:
            assert status == StockStatus.IN_STOCK


def test_fallback_classification():
    result = generate_fallback_classification("Mystery Box")

    assert result.product_name == "Mystery Box"
    assert result.category == "General Merchandise"
    assert result.hs_code == "9999.99.99"
    assert result.confidence == 70
    assert result.suggested_price == 50
    assert result.market_demand == MarketDemand.MEDIUM
    assert result.seasonality == "Year-round"
    assert result.compliance_risk == ComplianceRisk.LOW
    assert result.description == "Fallback analysis for Mystery Box. Manual review recommended."
