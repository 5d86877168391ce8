"""
Stock status derivation

Status depends on availability alone:
- 0        → out-of-stock
- 1 - 19   → low-stock
- 20+      → in-stock
"""
from packages.domain.enrichment.schemas import StockStatus

LOW_STOCK_THRESHOLD = 20


def derive_stock_status(availability: int) -> StockStatus:
    """Map an availability count to its stock status bucket"""
    if availability <= 0:
        return StockStatus.OUT_OF_STOCK
    if availability < LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK
