"""Quote arithmetic for translation orders.

Prices are whole AED. One delivery-tier type is used across intake, quoting and
storage; the legacy tier names only exist in ``LEGACY_TIER_ALIASES``.
"""
import enum


class DeliveryTier(str, enum.Enum):
    STANDARD = "STANDARD"
    NEXT_DAY = "NEXT_DAY"
    SAME_DAY = "SAME_DAY"


RATE_PER_PAGE = {
    DeliveryTier.STANDARD: 350,
    DeliveryTier.NEXT_DAY: 450,
    DeliveryTier.SAME_DAY: 550,
}

HARD_COPY_FEE = 50

# Older intake forms sent URGENT/EXPRESS for the two faster tiers.
LEGACY_TIER_ALIASES = {
    "URGENT": DeliveryTier.NEXT_DAY,
    "EXPRESS": DeliveryTier.SAME_DAY,
}


def parse_tier(value: str | None) -> DeliveryTier:
    """Resolve a submitted urgency value; empty means STANDARD.

    Raises ValueError for anything that is neither a tier nor a legacy alias.
    """
    if value is None or not value.strip():
        return DeliveryTier.STANDARD
    key = value.strip().upper()
    if key in LEGACY_TIER_ALIASES:
        return LEGACY_TIER_ALIASES[key]
    return DeliveryTier(key)


def parse_page_count(value) -> int | None:
    """Return the page count as a positive int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            pages = int(text)
            return pages if pages > 0 else None
    return None


def calculate_price(page_count, tier: DeliveryTier | str, hard_copy: bool = False) -> int:
    pages = parse_page_count(page_count)
    if pages is None:
        return 0
    rate = RATE_PER_PAGE[DeliveryTier(tier)]
    total = pages * rate
    if hard_copy:
        total += HARD_COPY_FEE
    return total
