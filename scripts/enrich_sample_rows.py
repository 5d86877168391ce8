#!/usr/bin/env python3
"""
Enrich a handful of sample rows end-to-end (no storage, prints results)

Exercises the full pipeline against the real inference API when HF_API_KEY
is set; without it every remote attempt is reported unavailable and rows
are classified according to ENRICHMENT_REMOTE_FAILURE_POLICY.

Usage:
    python scripts/enrich_sample_rows.py
    python scripts/enrich_sample_rows.py rows.json
"""
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from packages.common.config import get_settings
from packages.domain.enrichment.enrichment_service import EnrichmentService

logger = structlog.get_logger()


SAMPLE_ROWS = [
    {"name": "Wireless Headphones", "sku": "WH-100", "availability": "15"},
    {"productName": "Smart Phone Case", "stock": "120"},
    {"product": "Cotton Shirt", "quantity": 40, "warehouse": "Dock B", "country": "Canada"},
    {"name": "Office Chair", "availability": "7 units"},
    {"name": "Medical Gloves", "availability": "n/a"},
    {"availability": "0"},
]


async def main():
    """Enrich sample rows (or rows from a JSON file) and print a report"""
    settings = get_settings()

    rows = SAMPLE_ROWS
    if len(sys.argv) > 1:
        rows = json.loads(Path(sys.argv[1]).read_text())

    print("=" * 80)
    print("INVENTORY ENRICHMENT TEST")
    print("=" * 80)
    print(f"Inference API configured: {settings.hf_configured}")
    print(f"Remote failure policy: {settings.enrichment_remote_failure_policy}")
    print(f"Rows: {len(rows)}")
    print()

    service = EnrichmentService(settings=settings)
    items = await service.enrich_rows(rows)

    for i, item in enumerate(items, 1):
        print(f"\n[{i}] {item.name}")
        print(f"    SKU: {item.sku}")
        print(f"    Availability: {item.availability} → {item.status.value}")
        print(f"    Category: {item.category}")
        print(f"    HS code: {item.hs_code}")
        print(f"    Price: {item.price}")
        print(f"    Demand: {item.market_demand.value if item.market_demand else 'N/A'}")
        print(f"    Seasonality: {item.seasonality}")
        print(f"    Compliance risk: {item.compliance_risk.value if item.compliance_risk else 'N/A'}")
        if item.ai_analysis:
            print(f"    Confidence: {item.ai_analysis.confidence:.1f}%")

        if item.ai_classified:
            print(f"    ✓ AI-classified")
        else:
            print(f"    ⚠ FALLBACK - manual review recommended")

    summary = service.summarize(items)

    print()
    print("=" * 80)
    print("RESULTS")
    print("=" * 80)
    print(f"Total items: {summary.total_items}")
    print(f"AI-classified: {summary.ai_classified}")
    print(f"Fallback: {summary.fallback}")
    print(f"In stock / low / out: {summary.in_stock} / {summary.low_stock} / {summary.out_of_stock}")


if __name__ == "__main__":
    asyncio.run(main())
