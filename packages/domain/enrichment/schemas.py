"""
Data schemas for the inventory enrichment module

Models serialize with camelCase aliases (hsCode, aiClassified, ...) because
that is the shape the inventory storage/display layer consumes. Input
accepts either snake_case field names or the camelCase aliases.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MarketDemand(str, Enum):
    """Expected sales velocity tier"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ComplianceRisk(str, Enum):
    """Likelihood of regulatory/customs scrutiny"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StockStatus(str, Enum):
    """Stock level bucket derived from availability"""
    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Classification(CamelModel):
    """
    Structured trade classification for one product.

    Produced either by the keyword rules (heuristic path) or by the
    fallback generator when a row could not be processed.
    """
    product_name: str
    category: str
    hs_code: str = Field(..., description="Harmonized System code, e.g. 8517.12.00")
    confidence: float = Field(..., ge=70.0, le=100.0, description="Classification confidence (70-100)")
    suggested_price: int = Field(..., ge=0, description="Suggested price in whole currency units")
    market_demand: MarketDemand
    seasonality: str
    compliance_risk: ComplianceRisk
    description: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "productName": "Wireless Headphones",
                "category": "Electronics - Audio",
                "hsCode": "8518.30.00",
                "confidence": 90.0,
                "suggestedPrice": 194,
                "marketDemand": "high",
                "seasonality": "Holiday peak",
                "complianceRisk": "medium",
                "description": "AI-analyzed electronics - audio product with high market demand and medium compliance risk."
            }
        }
    )


class NormalizedRow(CamelModel):
    """Canonical fields extracted from a loosely shaped input row"""
    product_name: str
    sku: str
    availability: int = Field(..., ge=0)
    description: str = ""
    warehouse: str
    country: str


class InventoryItem(CamelModel):
    """
    Final enriched inventory record.

    This is what gets handed to the storage/display collaborator.
    """
    id: str
    sku: str
    name: str
    category: str
    availability: int = Field(..., ge=0)
    hs_code: str
    warehouse: str
    country: str
    last_synced: datetime
    status: StockStatus
    ai_classified: bool

    price: Optional[int] = None
    market_demand: Optional[MarketDemand] = None
    seasonality: Optional[str] = None
    compliance_risk: Optional[ComplianceRisk] = None
    ai_analysis: Optional[Classification] = None


class EnrichmentSummary(CamelModel):
    """Batch counters reported alongside enriched items"""
    total_items: int
    ai_classified: int
    fallback: int
    in_stock: int
    low_stock: int
    out_of_stock: int
