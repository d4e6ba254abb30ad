"""Amazon Associates link building."""

import re

from plumbprep.config import get_settings
from plumbprep.exceptions import ValidationError

AMAZON_PRODUCT_URL = "https://www.amazon.com/dp/{asin}?tag={tag}"

_ASIN_PATTERNS = (
    re.compile(r"/dp/([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"/gp/product/([A-Z0-9]{10})", re.IGNORECASE),
)


def extract_asin(url: str) -> str | None:
    """ASIN from an Amazon product URL, or None when the URL has none."""
    for pattern in _ASIN_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1).upper()
    return None


def generate_affiliate_link(
    url: str | None = None, asin: str | None = None, tag: str | None = None
) -> str:
    """
    Build an Amazon link carrying the associate tag.

    A known ASIN gives the canonical product URL. Otherwise the ASIN is read
    from the URL, and URLs without one get the tag appended as a query parameter.

    Raises:
        ValidationError: If neither a URL nor an ASIN is given
    """
    tag = tag or get_settings().AMAZON_ASSOCIATE_TAG
    if asin:
        return AMAZON_PRODUCT_URL.format(asin=asin.upper(), tag=tag)
    if not url:
        raise ValidationError("Either a URL or an ASIN is required")

    parsed_asin = extract_asin(url)
    if parsed_asin:
        return AMAZON_PRODUCT_URL.format(asin=parsed_asin, tag=tag)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}tag={tag}"
