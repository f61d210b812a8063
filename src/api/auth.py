"""Bearer credential handling. Issuing credentials is the job of the external authentication service."""

from typing import Optional, Protocol

from fastapi import Request

from src.core.exceptions import NotAuthenticatedError


class TokenVerifier(Protocol):
    def resolve(self, token: str) -> Optional[str]:
        """User id the token belongs to, None if the token is not valid."""
        ...


class StaticTokenVerifier:
    """Fixed token -> user id mapping (local development + tests)."""

    def __init__(self, tokens: dict[str, str]) -> None:
        self.tokens = dict(tokens)

    def resolve(self, token: str) -> Optional[str]:
        return self.tokens.get(token)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(request: Request) -> str:
    """Dependency: resolve the caller's identity from the Authorization header."""
    token = bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise NotAuthenticatedError("not authenticated: missing bearer credential")
    verifier: TokenVerifier = request.app.state.token_verifier
    user_id = verifier.resolve(token)
    if user_id is None:
        raise NotAuthenticatedError("not authenticated: invalid bearer credential")
    return user_id
