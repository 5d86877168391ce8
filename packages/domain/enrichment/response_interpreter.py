"""
Response Interpreter - Turns a remote analysis response into a Classification

The remote payload is logged but NOT consulted: classification content
always comes from the keyword rules applied to the original product text.
The remote call only decides whether the row counts as AI-classified.
"""
from typing import Any, Optional

import structlog

from packages.domain.enrichment.heuristic_classifier import HeuristicClassifier
from packages.domain.enrichment.schemas import Classification

logger = structlog.get_logger()


class ResponseInterpreter:
    """Derives the structured classification for a remote analysis attempt"""

    def __init__(self, classifier: Optional[HeuristicClassifier] = None):
        self.classifier = classifier or HeuristicClassifier()

    def interpret(
        self,
        product_name: str,
        description: str,
        response: Optional[Any],
    ) -> Classification:
        """
        Args:
            product_name: Original product name
            description: Original product description
            response: Decoded remote body, or None when no response is available

        Returns:
            Classification from the heuristic rules
        """
        logger.debug("interpreting_remote_response",
                    product_name=product_name,
                    has_response=response is not None,
                    response_type=type(response).__name__)

        return self.classifier.classify(product_name, description)
