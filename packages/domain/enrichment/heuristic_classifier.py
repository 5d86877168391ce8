"""
Heuristic Classifier - Rule-based trade classification from product names

NO AI CALLS - Pure keyword rules plus two adjustment passes:

1. Rule selection: first rule with a keyword at a word start wins (fixed order)
2. Trend adjustment: "smart" / "ai" / "wireless" → high demand, price x1.3
3. Compliance adjustment: recomputed from the final category

Only the confidence score is random (85-95), and its source is injectable
so tests can pin it.

Example:
- "Wireless Headphones" → Electronics - Audio, HS 8518.30.00
  → trend adjustment: demand high, price 149 x 1.3 = 194
  → compliance: Electronics → medium
"""
import random
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional, Tuple

import structlog

from packages.domain.enrichment.schemas import (
    Classification,
    ComplianceRisk,
    MarketDemand,
)

logger = structlog.get_logger()

ConfidenceSource = Callable[[], float]


@dataclass(frozen=True)
class KeywordRule:
    """One product family: any keyword in the name selects it"""
    keywords: Tuple[str, ...]
    category: str
    hs_code: str
    market_demand: MarketDemand
    base_price: int
    seasonality: str = "Year-round"
    compliance_risk: ComplianceRisk = ComplianceRisk.LOW

    def matches(self, name: str) -> bool:
        # Keywords match at word starts: "shoes" hits "shoe", "headphones" misses "phone"
        return any(re.search(rf"\b{re.escape(keyword)}", name) for keyword in self.keywords)


# Order matters: "smart phone shoe" must land on Mobile Devices, not Footwear
KEYWORD_RULES: Tuple[KeywordRule, ...] = (
    # === ELECTRONICS ===
    KeywordRule(
        keywords=("phone", "smartphone", "iphone", "mobile"),
        category="Electronics - Mobile Devices",
        hs_code="8517.12.00",
        market_demand=MarketDemand.HIGH,
        base_price=299,
        compliance_risk=ComplianceRisk.MEDIUM,
    ),
    KeywordRule(
        keywords=("laptop", "computer"),
        category="Electronics - Computing",
        hs_code="8471.30.01",
        market_demand=MarketDemand.HIGH,
        base_price=799,
        compliance_risk=ComplianceRisk.MEDIUM,
    ),
    KeywordRule(
        keywords=("headphone", "speaker", "audio"),
        category="Electronics - Audio",
        hs_code="8518.30.00",
        market_demand=MarketDemand.HIGH,
        base_price=149,
        seasonality="Holiday peak",
    ),
    KeywordRule(
        keywords=("camera",),
        category="Electronics - Photography",
        hs_code="8525.80.30",
        market_demand=MarketDemand.MEDIUM,
        base_price=599,
    ),
    KeywordRule(
        keywords=("watch", "smartwatch"),
        category="Electronics - Wearables",
        hs_code="9102.11.00",
        market_demand=MarketDemand.HIGH,
        base_price=249,
        seasonality="Holiday peak",
    ),

    # === TEXTILES ===
    KeywordRule(
        keywords=("shirt", "clothing", "apparel"),
        category="Textiles - Tops",
        hs_code="6109.10.00",
        market_demand=MarketDemand.MEDIUM,
        base_price=29,
        seasonality="Spring/Summer peak",
        compliance_risk=ComplianceRisk.MEDIUM,
    ),
    KeywordRule(
        keywords=("shoe", "footwear"),
        category="Footwear",
        hs_code="6403.99.00",
        market_demand=MarketDemand.MEDIUM,
        base_price=89,
        seasonality="Back-to-school surge",
    ),

    # === HOME & GARDEN ===
    KeywordRule(
        keywords=("furniture", "chair", "table"),
        category="Home & Garden - Furniture",
        hs_code="9403.60.00",
        market_demand=MarketDemand.MEDIUM,
        base_price=199,
        seasonality="Spring peak",
    ),
    KeywordRule(
        keywords=("kitchen", "cookware"),
        category="Home & Garden - Kitchen",
        hs_code="7323.93.00",
        market_demand=MarketDemand.MEDIUM,
        base_price=79,
        seasonality="Holiday peak",
    ),

    # === SPORTS ===
    KeywordRule(
        keywords=("sport", "fitness", "exercise"),
        category="Sports & Recreation",
        hs_code="9506.99.00",
        market_demand=MarketDemand.MEDIUM,
        base_price=39,
        seasonality="New Year surge",
    ),

    # === TOYS ===
    KeywordRule(
        keywords=("toy", "game"),
        category="Toys & Games",
        hs_code="9503.00.00",
        market_demand=MarketDemand.HIGH,
        base_price=24,
        seasonality="Holiday peak",
    ),
)

DEFAULT_RULE = KeywordRule(
    keywords=(),
    category="General Merchandise",
    hs_code="9999.99.99",
    market_demand=MarketDemand.MEDIUM,
    base_price=50,
)

# Unlike the rules, plain substring match, so "chair" and "mountain" also count as "ai"
TRENDING_KEYWORDS = ("smart", "ai", "wireless")
TRENDING_PRICE_MULTIPLIER = Decimal("1.3")

HIGH_RISK_KEYWORDS = ("food", "medical")

CONFIDENCE_FLOOR = 85.0
CONFIDENCE_SPREAD = 10.0


class HeuristicClassifier:
    """
    Keyword-rule classifier for trade attributes.

    Usage:
        classifier = HeuristicClassifier()
        result = classifier.classify("Wireless Headphones")
        print(result.category, result.hs_code, result.suggested_price)

    Tests pin the confidence:
        classifier = HeuristicClassifier(confidence_source=lambda: 0.5)  # → 90.0
    """

    def __init__(self, confidence_source: Optional[ConfidenceSource] = None):
        """
        Args:
            confidence_source: Callable returning a float in [0, 1).
                Defaults to a fresh random.Random().random.
        """
        self.confidence_source = confidence_source or random.Random().random

    def classify(self, product_name: str, description: str = "") -> Classification:
        """
        Classify a product by its name.

        Args:
            product_name: Product name as it appears in the source row
            description: Free-text description (case-folded, not matched by
                the current rule set)

        Returns:
            Classification with category, HS code, demand, seasonality,
            compliance risk, rounded suggested price and confidence
        """
        name = (product_name or "").lower()
        desc = (description or "").lower()

        rule = self.select_rule(name)

        market_demand = rule.market_demand
        price = Decimal(rule.base_price)

        if self._is_trending(name):
            market_demand = MarketDemand.HIGH
            price = price * TRENDING_PRICE_MULTIPLIER

        compliance_risk = self._adjust_compliance_risk(rule.category, name, rule.compliance_risk)
        suggested_price = int(price.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        logger.debug("heuristic_classification",
                    product_name=product_name,
                    category=rule.category,
                    hs_code=rule.hs_code,
                    has_description=bool(desc),
                    suggested_price=suggested_price)

        return Classification(
            product_name=product_name,
            category=rule.category,
            hs_code=rule.hs_code,
            confidence=self._confidence(),
            suggested_price=suggested_price,
            market_demand=market_demand,
            seasonality=rule.seasonality,
            compliance_risk=compliance_risk,
            description=(
                f"AI-analyzed {rule.category.lower()} product with "
                f"{market_demand.value} market demand and "
                f"{compliance_risk.value} compliance risk."
            ),
        )

    @staticmethod
    def select_rule(name: str) -> KeywordRule:
        """First matching rule in KEYWORD_RULES order, else DEFAULT_RULE"""
        for rule in KEYWORD_RULES:
            if rule.matches(name):
                return rule
        return DEFAULT_RULE

    @staticmethod
    def _is_trending(name: str) -> bool:
        return any(keyword in name for keyword in TRENDING_KEYWORDS)

    @staticmethod
    def _adjust_compliance_risk(
        category: str,
        name: str,
        current: ComplianceRisk
    ) -> ComplianceRisk:
        """
        Recompute compliance risk from the final category.

        Electronics are always medium; textiles and anything mentioning
        food or medical are high; everything else keeps the rule's value.
        """
        if "Electronics" in category:
            return ComplianceRisk.MEDIUM
        if "Textiles" in category or any(keyword in name for keyword in HIGH_RISK_KEYWORDS):
            return ComplianceRisk.HIGH
        return current

    def _confidence(self) -> float:
        fraction = float(self.confidence_source())
        if not 0.0 <= fraction < 1.0:
            raise ValueError(f"Confidence source must return a value in [0, 1), got {fraction}")
        return CONFIDENCE_FLOOR + CONFIDENCE_SPREAD * fraction
