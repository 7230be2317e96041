"""Data models for sessions and authorization results."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from pydantic import BaseModel

from src.portal.services.database.models import UserProfile

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a failure kind."""

    error: E


Result = Union[Ok[T], Err[E]]


class VerificationFailure(str, Enum):
    """
    Outcome of a rejected access token.

    Expired, malformed and revoked tokens are deliberately not distinguished:
    the identity provider does not guarantee that distinction is stable.
    """

    INVALID = "invalid"


class GuardFailure(str, Enum):
    """Reasons the authorization gate denies a request."""

    UNAUTHORIZED = "unauthorized"
    PROFILE_MISSING = "profile_missing"
    ROLE_DENIED = "role_denied"
    NO_RETAILER_LINKED = "no_retailer_linked"
    NOT_APPROVED = "not_approved"
    TRANSIENT_FAILURE = "transient_failure"


class CredentialPair(BaseModel):
    """Access and refresh token issued by the identity provider at sign-in."""

    access_token: str
    refresh_token: str


class Session(BaseModel):
    """
    Server-side view of an authenticated request.

    Never persisted; recomputed on every request by verifying the access
    token held in the session cookies.

    Attributes:
        subject_id: Identity-provider user ID ('sub' claim)
        email: User email, when the provider reports one
    """

    subject_id: str
    email: str | None = None


@dataclass(frozen=True)
class RetailerAccess:
    """Everything an approved-retailer surface needs about the caller."""

    session: Session
    profile: UserProfile
    retailer_id: str
