"""Encoding of the bundle metafield: {"products": [...ids], "discount": <int>}."""

import json
import logging
from typing import Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from app.schemas.bundle import BundleData

logger = logging.getLogger(__name__)


def encode_bundle_metafield(product_ids: Iterable[str], discount: int) -> str:
    """Serialise a bundle's member ids and discount into a metafield value."""
    payload = {
        "products": list(product_ids),
        "discount": int(discount),
    }
    return json.dumps(payload, separators=(",", ":"))


def decode_bundle_metafield(value: Optional[str]) -> Optional[BundleData]:
    """
    Parse a stored metafield value.

    Returns None when the value is absent, is not JSON, or is JSON of the wrong
    shape. Callers treat None as "no bundle data".
    """
    if not value:
        return None

    try:
        return BundleData.model_validate_json(value)
    except PydanticValidationError as e:
        logger.warning(f"Ignoring undecodable bundle metafield {value[:200]!r}: {e.error_count()} error(s)")
        logger.debug(f"Bundle metafield decode errors: {e.errors()}")
        return None
