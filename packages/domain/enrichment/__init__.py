"""
Enrichment Module - Turns raw spreadsheet rows into trade-ready inventory items

Per-row pipeline:
1. Row Normalizer: map loose column names to canonical fields
2. Remote attempt (Hugging Face Inference API)
3. Heuristic Classifier: keyword rules → category, HS code, demand,
   seasonality, compliance risk, suggested price
4. Assembly: stock status from availability, final InventoryItem

Failure handling:
- Row blows up → fallback classification (General Merchandise, 9999.99.99,
  confidence 70), ai_classified=False
- One bad row never aborts the batch

Example flow:
- {"name": "Wireless Headphones", "availability": "15"}
  → Electronics - Audio → HS 8518.30.00 → demand high → price 194 → low-stock
- {"availability": "0"}
  → "Product 1" → General Merchandise → out-of-stock
"""

from packages.domain.enrichment.enrichment_service import (
    EnrichmentService,
    RemoteFailurePolicy,
    get_enrichment_service,
)
from packages.domain.enrichment.exceptions import (
    AvailabilityParseError,
    EnrichmentError,
    RemoteUnavailableError,
    RowProcessingError,
)
from packages.domain.enrichment.fallback import generate_fallback_classification
from packages.domain.enrichment.heuristic_classifier import HeuristicClassifier
from packages.domain.enrichment.remote_client import HuggingFaceClient
from packages.domain.enrichment.response_interpreter import ResponseInterpreter
from packages.domain.enrichment.row_normalizer import RowNormalizer
from packages.domain.enrichment.schemas import (
    Classification,
    ComplianceRisk,
    InventoryItem,
    MarketDemand,
    StockStatus,
)
from packages.domain.enrichment.stock_status import derive_stock_status

__all__ = [
    'EnrichmentService',
    'RemoteFailurePolicy',
    'get_enrichment_service',
    'AvailabilityParseError',
    'EnrichmentError',
    'RemoteUnavailableError',
    'RowProcessingError',
    'generate_fallback_classification',
    'HeuristicClassifier',
    'HuggingFaceClient',
    'ResponseInterpreter',
    'RowNormalizer',
    'Classification',
    'ComplianceRisk',
    'InventoryItem',
    'MarketDemand',
    'StockStatus',
    'derive_stock_status',
]
