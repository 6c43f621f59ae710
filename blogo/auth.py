"""
Bearer-token authentication.

Tokens are HS256 JWTs carrying the user id, username and email. The services
only ever see the authenticated user id.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from blogo.config import JWT_EXPIRE_HOURS, JWT_SECRET

ISSUER = "blogo-api"


class InvalidToken(Exception):
    """Token is malformed, expired or signed with another key."""


@dataclass
class TokenClaims:
    user_id: int
    username: str
    email: str


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_hours: int = 24,
        issuer: str = ISSUER,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_hours = expires_hours
        self.issuer = issuer

    def issue_token(self, user_id: int, username: str, email: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "user_id": user_id,
            "username": username,
            "email": email,
            "iss": self.issuer,
            "iat": now,
            "exp": now + timedelta(hours=self.expires_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token, self.secret, algorithms=[self.algorithm], issuer=self.issuer
            )
        except JWTError as e:
            raise InvalidToken(str(e)) from e

        user_id = payload.get("user_id")
        if not isinstance(user_id, int):
            raise InvalidToken("token has no user id")
        return TokenClaims(
            user_id=user_id,
            username=payload.get("username", ""),
            email=payload.get("email", ""),
        )


token_issuer = TokenIssuer(JWT_SECRET, expires_hours=JWT_EXPIRE_HOURS)

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer() -> TokenIssuer:
    return token_issuer


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> int:
    """FastAPI dependency: id of the authenticated user, 401 otherwise."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return issuer.decode(credentials.credentials).user_id
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Optional[int]:
    """Like get_current_user_id, but anonymous or bad tokens yield None."""
    if credentials is None:
        return None
    try:
        return issuer.decode(credentials.credentials).user_id
    except InvalidToken:
        return None
