"""Pydantic models for login and registration."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Email/password sign-in request."""

    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    """Result of a successful sign-in."""

    success: bool = True
    redirect_to: str = Field(description="Page the client should navigate to next")


class RegisterRequest(BaseModel):
    """Retailer registration request."""

    email: str = Field(min_length=3, max_length=320)
    password: str
    confirm_password: str
    business_name: str = Field(min_length=1, max_length=255)
    website_url: str = Field(min_length=1, max_length=2048)
    commission: float = Field(0, ge=0, le=100, description="Commission rate (%)")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "email": "owner@retailer.com",
                "password": "correct-horse",
                "confirm_password": "correct-horse",
                "business_name": "Corner Store",
                "website_url": "https://cornerstore.example",
                "commission": 10,
            }
        }


class RegisterResponse(BaseModel):
    """Result of a successful registration."""

    success: bool = True
    message: str = (
        "Account created! Please check your email to verify your account. "
        "Your application will be reviewed by our team."
    )
    redirect_to: str = "/login"
