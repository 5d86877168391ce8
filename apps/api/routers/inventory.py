"""
Inventory API Router
Handles row enrichment, zero-shot text classification and description generation
"""
import structlog
from fastapi import APIRouter, Depends

from packages.common.schemas.inventory_api import (
    ClassifyTextRequest,
    ClassifyTextResponse,
    DescribeProductRequest,
    DescribeProductResponse,
    EnrichRowsRequest,
    EnrichRowsResponse,
)
from packages.domain.enrichment.enrichment_service import EnrichmentService, get_enrichment_service

logger = structlog.get_logger()
router = APIRouter()


@router.post("/enrich", response_model=EnrichRowsResponse)
async def enrich_rows(
    request: EnrichRowsRequest,
    service: EnrichmentService = Depends(get_enrichment_service),
) -> EnrichRowsResponse:
    """
    Enrich imported rows into inventory items

    - **rows**: raw rows; recognized keys include name/productName/product,
      sku/SKU, availability/stock/quantity, description, warehouse, country

    Always returns one item per row, in order. Rows that fail come back
    with `aiClassified: false` and General Merchandise defaults.
    """
    logger.info("enrich_request_received", row_count=len(request.rows))

    items = await service.enrich_rows(request.rows)

    return EnrichRowsResponse(
        items=items,
        summary=service.summarize(items),
    )


@router.post("/classify-text", response_model=ClassifyTextResponse)
async def classify_text(
    request: ClassifyTextRequest,
    service: EnrichmentService = Depends(get_enrichment_service),
) -> ClassifyTextResponse:
    """
    Zero-shot classify free text against the fixed product label set

    Returns `result: null` when the inference API is unavailable.
    """
    result = await service.client.classify_text(request.text)
    return ClassifyTextResponse(result=result)


@router.post("/describe", response_model=DescribeProductResponse)
async def describe_product(
    request: DescribeProductRequest,
    service: EnrichmentService = Depends(get_enrichment_service),
) -> DescribeProductResponse:
    """Generate a short listing description for a product"""
    description = await service.client.generate_product_description(request.product_name)
    return DescribeProductResponse(
        product_name=request.product_name,
        description=description,
    )
