"""
Row Normalizer - Schema mapping from loosely shaped rows to canonical fields

Spreadsheet exports disagree on column names ("name" vs "productName" vs
"product", "stock" vs "quantity"). Each canonical field declares its ordered
source keys and its default once, in RowNormalizer.field_specs; normalize()
walks those declarations instead of chaining lookups inline.

A value counts as missing when it is None, a blank string, or a float NaN
(pandas fills empty cells with NaN).
"""
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import structlog

from packages.common.config import Settings, get_settings
from packages.domain.enrichment.exceptions import AvailabilityParseError, RowProcessingError
from packages.domain.enrichment.schemas import NormalizedRow

logger = structlog.get_logger()

Clock = Callable[[], datetime]

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class FieldSpec:
    """
    Canonical field declaration.

    Attributes:
        name: Canonical field name on NormalizedRow
        source_keys: Row keys to try, in priority order
        default: Builds the value when no source key is present; receives
            the row's batch index
    """
    name: str
    source_keys: Tuple[str, ...]
    default: Callable[[int], Any]

    def resolve(self, row: Mapping[str, Any], index: int) -> Any:
        for key in self.source_keys:
            value = row.get(key)
            if not is_missing(value):
                return value
        return self.default(index)


def is_missing(value: Any) -> bool:
    """True for None, blank strings and NaN"""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def parse_availability(value: Any) -> int:
    """
    Parse a stock count with leading-integer semantics.

    "15" → 15, "15 units" → 15, "12.7" → 12, 12.7 → 12

    Raises:
        AvailabilityParseError: value has no leading integer
    """
    if isinstance(value, bool):
        raise AvailabilityParseError(f"Availability is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise AvailabilityParseError(f"Availability is not a number: {value!r}")
        return int(value)

    match = LEADING_INT_PATTERN.match(str(value))
    if not match:
        raise AvailabilityParseError(f"Availability is not a number: {value!r}")
    return int(match.group(1))


class RowNormalizer:
    """
    Extracts NormalizedRow fields from arbitrary input rows.

    Usage:
        normalizer = RowNormalizer()
        row = normalizer.normalize({"productName": "Desk Chair", "stock": "12"}, index=0)
        print(row.product_name, row.availability)  # Desk Chair 12
    """

    def __init__(
        self,
        default_warehouse: Optional[str] = None,
        default_country: Optional[str] = None,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            default_warehouse: Used when a row has no warehouse (defaults to DEFAULT_WAREHOUSE)
            default_country: Used when a row has no country (defaults to DEFAULT_COUNTRY)
            clock: Returns "now"; feeds generated SKUs
            settings: Settings to draw defaults from
        """
        settings = settings or get_settings()
        self.default_warehouse = default_warehouse or settings.default_warehouse
        self.default_country = default_country or settings.default_country
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.field_specs: Tuple[FieldSpec, ...] = (
            FieldSpec(
                name="product_name",
                source_keys=("name", "productName", "product"),
                default=lambda index: f"Product {index + 1}",
            ),
            FieldSpec(
                name="sku",
                source_keys=("sku", "SKU"),
                default=self._generate_sku,
            ),
            FieldSpec(
                name="availability",
                source_keys=("availability", "stock", "quantity"),
                default=lambda index: "0",
            ),
            FieldSpec(
                name="description",
                source_keys=("description",),
                default=lambda index: "",
            ),
            FieldSpec(
                name="warehouse",
                source_keys=("warehouse",),
                default=lambda index: self.default_warehouse,
            ),
            FieldSpec(
                name="country",
                source_keys=("country",),
                default=lambda index: self.default_country,
            ),
        )

    def normalize(self, row: Mapping[str, Any], index: int) -> NormalizedRow:
        """
        Resolve every canonical field for one row.

        Args:
            row: Raw input row (any keys, all optional)
            index: Zero-based position in the batch

        Returns:
            NormalizedRow

        Raises:
            RowProcessingError: row is not a mapping
        """
        if not isinstance(row, Mapping):
            raise RowProcessingError(
                f"Row {index + 1} is {type(row).__name__}, expected a mapping",
                index=index,
            )

        values: Dict[str, Any] = {
            spec.name: spec.resolve(row, index) for spec in self.field_specs
        }
        values["availability"] = self._coerce_availability(values["availability"], index)

        for key in ("product_name", "sku", "description", "warehouse", "country"):
            values[key] = str(values[key])

        return NormalizedRow(**values)

    def normalize_safely(self, row: Any, index: int) -> NormalizedRow:
        """
        Same as normalize() but never raises; non-mapping rows are treated
        as empty.
        """
        try:
            return self.normalize(row if isinstance(row, Mapping) else {}, index)
        except Exception as e:
            logger.error("row_normalization_failed",
                        index=index,
                        error=str(e),
                        exc_info=True)
            return NormalizedRow(
                product_name=f"Product {index + 1}",
                sku=self._generate_sku(index),
                availability=0,
                description="",
                warehouse=self.default_warehouse,
                country=self.default_country,
            )

    def _coerce_availability(self, value: Any, index: int) -> int:
        try:
            availability = parse_availability(value)
        except AvailabilityParseError as e:
            logger.debug("availability_parse_failed",
                        index=index,
                        value=str(value),
                        error=str(e))
            return 0

        if availability < 0:
            logger.debug("availability_negative_clamped",
                        index=index,
                        value=availability)
            return 0
        return availability

    def _generate_sku(self, index: int) -> str:
        epoch_ms = int(self.clock().timestamp() * 1000)
        return f"SKU-{epoch_ms}-{index}"
