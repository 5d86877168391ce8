"""
Inventory API contract - Request/response shapes for the enrichment endpoints

Rows are accepted as-is: spreadsheet exports use whatever column names they
like, and the enrichment pipeline sorts that out. Responses use camelCase.
"""
from typing import Any, List, Optional

from pydantic import Field

from packages.domain.enrichment.schemas import CamelModel, EnrichmentSummary, InventoryItem


class EnrichRowsRequest(CamelModel):
    """Batch of raw rows parsed from an imported spreadsheet"""
    rows: List[Any] = Field(..., description="Raw rows; mappings with arbitrary keys")

    model_config = {
        "json_schema_extra": {
            "example": {
                "rows": [
                    {"name": "Wireless Headphones", "sku": "WH-100", "availability": "15"},
                    {"productName": "Cotton Shirt", "stock": 40, "warehouse": "Dock B"},
                    {"availability": "0"},
                ]
            }
        }
    }


class EnrichRowsResponse(CamelModel):
    """Enriched items in input order plus batch counters"""
    items: List[InventoryItem]
    summary: EnrichmentSummary


class ClassifyTextRequest(CamelModel):
    text: str = Field(..., min_length=1, description="Free text to classify")


class ClassifyTextResponse(CamelModel):
    """Zero-shot result as returned by the inference API, or null if unavailable"""
    result: Optional[Any] = None


class DescribeProductRequest(CamelModel):
    product_name: str = Field(..., min_length=1)


class DescribeProductResponse(CamelModel):
    product_name: str
    description: str
