"""
Fallback Generator - Safe-default classification for rows that failed
"""
from packages.domain.enrichment.schemas import (
    Classification,
    ComplianceRisk,
    MarketDemand,
)

FALLBACK_CATEGORY = "General Merchandise"
FALLBACK_HS_CODE = "9999.99.99"
FALLBACK_CONFIDENCE = 70.0
FALLBACK_PRICE = 50


def generate_fallback_classification(product_name: str) -> Classification:
    """
    Low-confidence classification flagged for manual review.

    Args:
        product_name: Product name to echo back in the result

    Returns:
        General Merchandise classification with confidence 70
    """
    return Classification(
        product_name=product_name,
        category=FALLBACK_CATEGORY,
        hs_code=FALLBACK_HS_CODE,
        confidence=FALLBACK_CONFIDENCE,
        suggested_price=FALLBACK_PRICE,
        market_demand=MarketDemand.MEDIUM,
        seasonality="Year-round",
        compliance_risk=ComplianceRisk.LOW,
        description=f"Fallback analysis for {product_name}. Manual review recommended.",
    )
