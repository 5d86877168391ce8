"""
Enrichment Service - Orchestrates row-to-item enrichment

Flow per row:
1. Normalize: map loose row keys to canonical fields
2. Status: derive stock status from availability
3. Remote attempt: ask the inference API about the product
4. Interpret: derive the classification from the product text
5. Assemble: build the InventoryItem

Example:
- Input: {"name": "Wireless Headphones", "availability": "15"}
- Status: low-stock
- Classification: Electronics - Audio, HS 8518.30.00, demand high, price 194
- Output: InventoryItem(ai_classified=True, ...)

Failure isolation:
- Any unexpected error in a row → fallback classification,
  ai_classified=False, batch continues
- Remote unavailable → routed by remote_failure_policy:
    heuristic: classify from the rules anyway (ai_classified=True)
    fallback:  fallback classification (ai_classified=False)
"""
import asyncio
from datetime import datetime, timezone
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, List, Optional, Sequence, Tuple

import structlog
from prometheus_client import Counter

from packages.common.config import Settings, get_settings
from packages.domain.enrichment.exceptions import RemoteUnavailableError
from packages.domain.enrichment.fallback import generate_fallback_classification
from packages.domain.enrichment.heuristic_classifier import HeuristicClassifier
from packages.domain.enrichment.rate_limiter import RemoteCallLimiter
from packages.domain.enrichment.remote_client import HuggingFaceClient
from packages.domain.enrichment.response_interpreter import ResponseInterpreter
from packages.domain.enrichment.row_normalizer import RowNormalizer
from packages.domain.enrichment.schemas import (
    Classification,
    EnrichmentSummary,
    InventoryItem,
    NormalizedRow,
    StockStatus,
)
from packages.domain.enrichment.stock_status import derive_stock_status

logger = structlog.get_logger()

ROWS_ENRICHED = Counter(
    "inventory_rows_enriched_total",
    "Inventory rows enriched, by outcome",
    ["outcome"],
)
REMOTE_FAILURES = Counter(
    "inventory_remote_analysis_failures_total",
    "Remote analysis calls that raised RemoteUnavailableError",
)


class RemoteFailurePolicy(str, Enum):
    """What to do with a row when the inference API is unavailable"""
    HEURISTIC = "heuristic"   # Classify from rules, still counts as AI-classified
    FALLBACK = "fallback"     # Safe defaults, flagged for manual review


class EnrichmentService:
    """
    Turns raw spreadsheet rows into enriched InventoryItems.

    Usage:
        service = EnrichmentService()
        items = await service.enrich_rows([
            {"name": "Wireless Headphones", "availability": "15"},
            {"productName": "Cotton Shirt", "stock": 40, "warehouse": "Dock B"},
        ])
        for item in items:
            print(item.name, item.category, item.status.value, item.ai_classified)
    """

    def __init__(
        self,
        client: Optional[HuggingFaceClient] = None,
        classifier: Optional[HeuristicClassifier] = None,
        interpreter: Optional[ResponseInterpreter] = None,
        normalizer: Optional[RowNormalizer] = None,
        limiter: Optional[RemoteCallLimiter] = None,
        remote_failure_policy: Optional[RemoteFailurePolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize with explicit collaborators; anything omitted is built
        from settings.

        Args:
            client: Inference API client
            classifier: Keyword-rule classifier (shared with the interpreter
                when no interpreter is given)
            interpreter: Remote response interpreter
            normalizer: Row schema mapper
            limiter: Remote call limiter (concurrency + pause)
            remote_failure_policy: Routing for RemoteUnavailableError
            clock: Returns "now"; feeds ids and last_synced
            settings: Settings to draw defaults from
        """
        settings = settings or get_settings()

        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.client = client or HuggingFaceClient(settings=settings)
        self.classifier = classifier or HeuristicClassifier()
        self.interpreter = interpreter or ResponseInterpreter(self.classifier)
        self.normalizer = normalizer or RowNormalizer(clock=self.clock, settings=settings)
        self.limiter = limiter or RemoteCallLimiter(
            max_concurrency=settings.enrichment_max_concurrency,
            min_interval=settings.enrichment_request_delay_seconds,
        )
        self.remote_failure_policy = RemoteFailurePolicy(
            remote_failure_policy or settings.enrichment_remote_failure_policy
        )

    async def enrich_rows(self, rows: Sequence[Any]) -> List[InventoryItem]:
        """
        Enrich a batch of rows.

        Never raises because of row content: every input row yields exactly
        one item, in input order.

        Args:
            rows: Raw rows (mappings with arbitrary keys)

        Returns:
            List of InventoryItem, same length and order as rows
        """
        logger.info("batch_enrichment_started",
                   row_count=len(rows),
                   max_concurrency=self.limiter.max_concurrency,
                   remote_failure_policy=self.remote_failure_policy.value)

        if self.limiter.max_concurrency == 1:
            items = []
            for index, row in enumerate(rows):
                items.append(await self.enrich_row(row, index))
        else:
            # Rows overlap, but remote calls are still gated by the limiter
            items = list(await asyncio.gather(
                *(self.enrich_row(row, index) for index, row in enumerate(rows))
            ))

        summary = self.summarize(items)
        logger.info("batch_enrichment_complete",
                   total_items=summary.total_items,
                   ai_classified=summary.ai_classified,
                   fallback=summary.fallback,
                   in_stock=summary.in_stock,
                   low_stock=summary.low_stock,
                   out_of_stock=summary.out_of_stock)

        return items

    async def enrich_row(self, row: Any, index: int) -> InventoryItem:
        """
        Enrich a single row in isolation.

        Args:
            row: Raw row
            index: Zero-based batch position (used for ids and default names)

        Returns:
            InventoryItem; a fallback item if anything goes wrong
        """
        try:
            normalized = self.normalizer.normalize(row, index)
            status = derive_stock_status(normalized.availability)

            logger.debug("row_enrichment_started",
                        index=index,
                        product_name=normalized.product_name,
                        sku=normalized.sku,
                        availability=normalized.availability,
                        status=status.value)

            classification, ai_classified = await self._classify(normalized, index)
            item = self._assemble(normalized, status, classification, ai_classified, index)

        except Exception as e:
            logger.error("row_enrichment_failed",
                        index=index,
                        error=str(e),
                        error_type=type(e).__name__,
                        exc_info=True)
            item = self._fallback_item(row, index)

        ROWS_ENRICHED.labels(outcome="ai_classified" if item.ai_classified else "fallback").inc()

        logger.info("row_enrichment_complete",
                   index=index,
                   sku=item.sku,
                   category=item.category,
                   hs_code=item.hs_code,
                   status=item.status.value,
                   ai_classified=item.ai_classified)

        return item

    async def _classify(
        self,
        normalized: NormalizedRow,
        index: int,
    ) -> Tuple[Classification, bool]:
        """
        Remote attempt followed by interpretation.

        Returns:
            (classification, ai_classified)
        """
        try:
            async with self.limiter.slot():
                response = await self.client.analyze_product(
                    normalized.product_name,
                    normalized.description,
                )
        except RemoteUnavailableError as e:
            REMOTE_FAILURES.inc()
            logger.warning("remote_analysis_unavailable",
                          index=index,
                          product_name=normalized.product_name,
                          status_code=e.status_code,
                          error=str(e),
                          policy=self.remote_failure_policy.value)

            if self.remote_failure_policy == RemoteFailurePolicy.FALLBACK:
                return generate_fallback_classification(normalized.product_name), False
            response = None

        classification = self.interpreter.interpret(
            normalized.product_name,
            normalized.description,
            response,
        )
        return classification, True

    def _fallback_item(self, row: Any, index: int) -> InventoryItem:
        normalized = self.normalizer.normalize_safely(row, index)
        classification = generate_fallback_classification(normalized.product_name)
        status = derive_stock_status(normalized.availability)
        return self._assemble(normalized, status, classification, False, index)

    def _assemble(
        self,
        normalized: NormalizedRow,
        status: StockStatus,
        classification: Classification,
        ai_classified: bool,
        index: int,
    ) -> InventoryItem:
        now = self.clock()
        epoch_ms = int(now.timestamp() * 1000)

        return InventoryItem(
            id=f"item-{epoch_ms}-{index}",
            sku=normalized.sku,
            name=normalized.product_name,
            category=classification.category,
            availability=normalized.availability,
            hs_code=classification.hs_code,
            warehouse=normalized.warehouse,
            country=normalized.country,
            last_synced=now,
            status=status,
            ai_classified=ai_classified,
            price=classification.suggested_price,
            market_demand=classification.market_demand,
            seasonality=classification.seasonality,
            compliance_risk=classification.compliance_risk,
            ai_analysis=classification,
        )

    @staticmethod
    def summarize(items: Sequence[InventoryItem]) -> EnrichmentSummary:
        """Count outcomes and stock buckets for a batch"""
        ai_classified = sum(1 for item in items if item.ai_classified)
        return EnrichmentSummary(
            total_items=len(items),
            ai_classified=ai_classified,
            fallback=len(items) - ai_classified,
            in_stock=sum(1 for item in items if item.status == StockStatus.IN_STOCK),
            low_stock=sum(1 for item in items if item.status == StockStatus.LOW_STOCK),
            out_of_stock=sum(1 for item in items if item.status == StockStatus.OUT_OF_STOCK),
        )


@lru_cache()
def get_enrichment_service() -> EnrichmentService:
    """Get cached service instance built from settings"""
    return EnrichmentService(settings=get_settings())
