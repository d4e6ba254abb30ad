from pydantic import BaseModel, Field


class BulkPricingTier(BaseModel):
    name: str
    min_students: int
    max_students: int | None = Field(None, description="None means no upper bound")
    discount_rate: float


class BulkPricingRequest(BaseModel):
    student_count: int = Field(..., ge=1, le=10000)
    courses: list[str] = Field(default_factory=lambda: ["journeyman"], min_length=1)


class BulkPricingQuote(BaseModel):
    student_count: int
    courses: list[str]
    base_price_per_student: float = Field(..., description="Price of one course seat")
    total_price: float
    tier: BulkPricingTier | None
    discount_rate: float
    discount_amount: float
    final_price: float
    price_per_student: float
