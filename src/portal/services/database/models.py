"""Pydantic models for database entities."""

from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    """Application roles stored on user profiles."""

    RETAILER = "retailer"
    ADMIN = "admin"


class RetailerStatus(str, Enum):
    """Retailer approval lifecycle status (transitions owned by admins)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DealStatus(str, Enum):
    """Deal review status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserProfile(BaseModel):
    """
    Row of the user_profiles table.

    Role is kept as a plain string so that roles unknown to this service are
    loaded and then denied, rather than failing validation.
    """

    id: str
    role: str | None = None
    retailer_id: str | None = None


class Retailer(BaseModel):
    """Row of the retailers table."""

    id: str
    status: str
    business_name: str | None = None
    slug: str | None = None
    website_url: str | None = None
    commission: float | None = None
