"""Pydantic models for the retailer dashboard."""

from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl


class DealSummary(BaseModel):
    """Deal row as listed on the dashboard."""

    id: str
    title: str
    status: str
    created_at: datetime | None = None


class DashboardResponse(BaseModel):
    """Response model for the dashboard landing page."""

    retailer_id: str
    business_name: str | None = None
    email: str | None = None
    deals: list[DealSummary] = []


class Category(BaseModel):
    """Active deal category."""

    id: str
    name: str


class NewDealPageResponse(BaseModel):
    """Data needed to render the deal submission form."""

    retailer_id: str
    categories: list[Category]


class DealCreateRequest(BaseModel):
    """Request model for submitting a deal for review."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    category_id: str
    deal_url: HttpUrl
    original_price: float | None = Field(None, ge=0)
    deal_price: float | None = Field(None, ge=0)
    expires_at: datetime | None = None

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "title": "20% off all coffee beans",
                "category_id": "food-and-drink",
                "deal_url": "https://cornerstore.example/coffee",
                "original_price": 25.0,
                "deal_price": 20.0,
            }
        }


class DealCreateResponse(BaseModel):
    """Response model for a submitted deal."""

    id: str
    status: str
    message: str = "Deal submitted for review"
