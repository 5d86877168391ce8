"""
Remote Classification Client - Hugging Face Inference API wrapper

Three independent capabilities, each backed by its own model:
- analyze_product: free-text trade analysis prompt (used per row)
- classify_text: zero-shot classification over a fixed label set
- generate_product_description: text generation for listings

analyze_product() converts every failure into RemoteUnavailableError so the
enrichment service has exactly one thing to catch. The other two degrade
to None / a stock sentence instead of raising.
"""
from typing import Any, Dict, List, Optional

import httpx
import structlog

from packages.common.config import Settings, get_settings
from packages.domain.enrichment.exceptions import RemoteUnavailableError

logger = structlog.get_logger()

CANDIDATE_LABELS: List[str] = [
    "electronics",
    "clothing",
    "home",
    "sports",
    "toys",
    "books",
    "automotive",
]


class HuggingFaceClient:
    """
    Thin async client for the inference endpoint.

    Usage:
        client = HuggingFaceClient(api_key="hf_...", base_url="https://api-inference.huggingface.co")
        raw = await client.analyze_product("Wireless Headphones", "Over-ear, noise cancelling")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        analysis_model: Optional[str] = None,
        zero_shot_model: Optional[str] = None,
        description_model: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer token (defaults to HF_API_KEY)
            base_url: Endpoint root (defaults to HF_BASE_URL)
            analysis_model: Model id for product analysis
            zero_shot_model: Model id for zero-shot classification
            description_model: Model id for description generation
            timeout: Per-request timeout in seconds
            http_client: Shared httpx.AsyncClient (one is opened per call if omitted)
            settings: Settings to draw defaults from
        """
        settings = settings or get_settings()

        self.api_key = api_key if api_key is not None else settings.hf_api_key
        self.base_url = (base_url or settings.hf_base_url).rstrip("/")
        self.analysis_model = analysis_model or settings.hf_analysis_model
        self.zero_shot_model = zero_shot_model or settings.hf_zero_shot_model
        self.description_model = description_model or settings.hf_description_model
        self.timeout = timeout if timeout is not None else settings.hf_request_timeout_seconds
        self._http_client = http_client

        if not self.api_key:
            logger.warning("hf_api_key_missing",
                          message="HF_API_KEY not set, remote analysis will be skipped")

    async def analyze_product(self, product_name: str, description: str = "") -> Any:
        """
        Ask the analysis model about a product.

        Args:
            product_name: Product name
            description: Product description (may be empty)

        Returns:
            Decoded JSON response body

        Raises:
            RemoteUnavailableError: No API key, non-2xx status, timeout,
                any other request failure, or a body that isn't JSON
        """
        if not self.api_key:
            raise RemoteUnavailableError("Hugging Face API key not configured")

        prompt = self._build_analysis_prompt(product_name, description)
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_length": 200,
                "temperature": 0.7,
                "return_full_text": False,
            },
        }

        try:
            response = await self._post(self.analysis_model, payload)
        except httpx.TimeoutException as e:
            logger.warning("remote_analysis_timeout",
                          product_name=product_name,
                          timeout=self.timeout)
            raise RemoteUnavailableError(f"Hugging Face API timeout: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("remote_analysis_transport_error",
                          product_name=product_name,
                          error=str(e))
            raise RemoteUnavailableError(f"Hugging Face API transport error: {e}") from e
        except Exception as e:
            # Bad base URL, non-ASCII key in the auth header, transport bugs
            logger.warning("remote_analysis_failed",
                          product_name=product_name,
                          error=str(e),
                          error_type=type(e).__name__)
            raise RemoteUnavailableError(f"Hugging Face API request failed: {e}") from e

        if not response.is_success:
            logger.warning("remote_analysis_failed",
                          product_name=product_name,
                          status_code=response.status_code)
            raise RemoteUnavailableError(
                f"Hugging Face API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            logger.warning("remote_analysis_bad_body",
                          product_name=product_name,
                          error=str(e))
            raise RemoteUnavailableError("Hugging Face API returned a non-JSON body") from e

        logger.info("remote_analysis_complete",
                   product_name=product_name,
                   model=self.analysis_model,
                   response_type=type(result).__name__)
        return result

    async def classify_text(self, text: str) -> Optional[Dict[str, Any]]:
        """
        Zero-shot classify text against CANDIDATE_LABELS.

        Returns:
            Decoded response (labels + scores) or None on any failure
        """
        if not self.api_key:
            logger.debug("text_classification_skipped", reason="no_api_key")
            return None

        payload = {
            "inputs": text,
            "parameters": {"candidate_labels": CANDIDATE_LABELS},
        }

        try:
            response = await self._post(self.zero_shot_model, payload)
            if not response.is_success:
                raise RemoteUnavailableError(
                    f"Classification API error: {response.status_code}",
                    status_code=response.status_code,
                )
            return response.json()

        except Exception as e:
            logger.error("text_classification_failed",
                        text=text,
                        error=str(e))
            return None

    async def generate_product_description(self, product_name: str) -> str:
        """
        Generate a short listing description.

        Returns:
            Generated text, or a stock sentence if generation fails
        """
        default = f"High-quality {product_name} for international trade."

        if not self.api_key:
            logger.debug("description_generation_skipped", reason="no_api_key")
            return default

        payload = {
            "inputs": f"Product description for {product_name}:",
            "parameters": {
                "max_length": 100,
                "temperature": 0.7,
            },
        }

        try:
            response = await self._post(self.description_model, payload)
            if not response.is_success:
                raise RemoteUnavailableError(
                    f"Description generation error: {response.status_code}",
                    status_code=response.status_code,
                )
            result = response.json()

        except Exception as e:
            logger.error("description_generation_failed",
                        product_name=product_name,
                        error=str(e))
            return default

        if isinstance(result, list) and result and isinstance(result[0], dict):
            generated = result[0].get("generated_text")
            if generated:
                return generated
        return default

    async def _post(self, model: str, payload: Dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/models/{model}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        if self._http_client is not None:
            return await self._http_client.post(url, json=payload, headers=headers, timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, json=payload, headers=headers)

    @staticmethod
    def _build_analysis_prompt(product_name: str, description: str) -> str:
        return f"""Analyze this product for international trade:
Product: {product_name}
Description: {description}

Provide analysis for: category, HS code, market demand, seasonality, compliance risk, and suggested pricing."""
