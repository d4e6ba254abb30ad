"""Bulk enrollment pricing for companies training several plumbers."""

from plumbprep import schemas

BASE_PRICE_PER_STUDENT = 49.0

BULK_PRICING_TIERS = (
    schemas.BulkPricingTier(name="Small Team", min_students=5, max_students=19, discount_rate=0.10),
    schemas.BulkPricingTier(name="Medium Team", min_students=20, max_students=49, discount_rate=0.15),
    schemas.BulkPricingTier(name="Large Company", min_students=50, max_students=None, discount_rate=0.25),
)


def get_bulk_pricing_tiers() -> list[schemas.BulkPricingTier]:
    return list(BULK_PRICING_TIERS)


def get_tier_for_count(student_count: int) -> schemas.BulkPricingTier | None:
    for tier in BULK_PRICING_TIERS:
        if student_count >= tier.min_students and (
            tier.max_students is None or student_count <= tier.max_students
        ):
            return tier
    return None


def calculate_bulk_price(request: schemas.BulkPricingRequest) -> schemas.BulkPricingQuote:
    """Quote for ``student_count`` seats in each requested course."""
    total_price = round(BASE_PRICE_PER_STUDENT * request.student_count * len(request.courses), 2)
    tier = get_tier_for_count(request.student_count)
    discount_rate = tier.discount_rate if tier else 0.0
    discount_amount = round(total_price * discount_rate, 2)
    final_price = round(total_price - discount_amount, 2)
    return schemas.BulkPricingQuote(
        student_count=request.student_count,
        courses=request.courses,
        base_price_per_student=BASE_PRICE_PER_STUDENT,
        total_price=total_price,
        tier=tier,
        discount_rate=discount_rate,
        discount_amount=discount_amount,
        final_price=final_price,
        price_per_student=round(final_price / request.student_count, 2),
    )
