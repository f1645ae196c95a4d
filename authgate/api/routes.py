"""HTTP route definitions for registration, login and profile retrieval."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import BaseModel, model_validator

from ..domain.account import AccountPublic
from ..domain.contracts import Credentials, VerifiedIdentity
from ..domain.service import AuthenticationService, ProfileService, RegistrationService
from .gate import require_identity

auth_router = APIRouter(prefix="/auth", tags=["auth"])
profile_router = APIRouter(tags=["profile"])


class CredentialsRequest(BaseModel):
    """Body accepted by both register and login; presence is checked by the flows."""

    email: str | None = None
    password: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _non_object_has_no_fields(cls, data: Any) -> Any:
        # A JSON array or scalar carries neither field.
        return data if isinstance(data, dict) else {}

    def to_domain(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)


def _credentials(payload: CredentialsRequest | None) -> Credentials:
    if payload is None:
        return Credentials(email=None, password=None)
    return payload.to_domain()


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    token: str


class ProfileResponse(BaseModel):
    """Serialised public account; ``created_at`` is ISO-8601."""

    id: str
    email: str
    created_at: str

    @classmethod
    def from_domain(cls, account: AccountPublic) -> "ProfileResponse":
        """Build a response model from the public account projection."""
        return cls(
            id=account.id,
            email=account.email,
            created_at=account.created_at.isoformat(),
        )


def get_registration_service(request: Request) -> RegistrationService:
    service: RegistrationService = request.app.state.registration_service
    return service


def get_authentication_service(request: Request) -> AuthenticationService:
    service: AuthenticationService = request.app.state.authentication_service
    return service


def get_profile_service(request: Request) -> ProfileService:
    service: ProfileService = request.app.state.profile_service
    return service


@auth_router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: CredentialsRequest | None = Body(default=None),
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    """Create an account. No token is issued; clients log in separately."""
    service.register(_credentials(payload))
    return MessageResponse(message="User registered successfully")


@auth_router.post("/login", response_model=TokenResponse)
def login(
    payload: CredentialsRequest | None = Body(default=None),
    service: AuthenticationService = Depends(get_authentication_service),
) -> TokenResponse:
    """Exchange email and password for a one-hour bearer token."""
    return TokenResponse(token=service.authenticate(_credentials(payload)))


@profile_router.get("/profile", response_model=ProfileResponse)
def get_profile(
    identity: VerifiedIdentity = Depends(require_identity),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Return the authenticated caller's account."""
    return ProfileResponse.from_domain(service.get_profile(identity))
