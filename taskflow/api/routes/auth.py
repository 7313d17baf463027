"""Authentication routes."""

from typing import Union

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ...domain.errors import AuthError
from ...repositories.memory import InMemoryBackend
from .tasks import get_backend

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class RegisterRequest(BaseModel):
    """Registration request model."""

    name: str
    email: str
    password: str


class AuthResponse(BaseModel):
    """Registration response: token and identity together."""

    token: str
    name: str
    email: str


@router.post("/login", response_class=PlainTextResponse)
async def login(
    body: LoginRequest,
    backend: InMemoryBackend = Depends(get_backend),
) -> PlainTextResponse:
    """Return the raw bearer token as plain text."""
    try:
        token = backend.login(body.email, body.password)
    except AuthError as e:
        return PlainTextResponse(str(e), status_code=401)
    return PlainTextResponse(token)


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    backend: InMemoryBackend = Depends(get_backend),
) -> Union[AuthResponse, PlainTextResponse]:
    """Create an account and return its token and identity."""
    try:
        result = backend.register(body.name, body.email, body.password)
    except AuthError as e:
        return PlainTextResponse(str(e), status_code=400)
    return AuthResponse(token=result.token, name=result.name or "", email=result.email)
