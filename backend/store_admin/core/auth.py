"""
Authentication for the Store Admin API
Validates NextAuth JWT session tokens issued by the dashboard and provides user context
"""
import hmac
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from store_admin.core.config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# NextAuth stores the session JWT in one of these cookies
SESSION_COOKIES = ("__Secure-next-auth.session-token", "next-auth.session-token")

INTERNAL_CALL_HEADER = "x-internal-api-call"


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: str
    email: str
    name: Optional[str] = None
    role: str = "user"


class AuthConfig:
    """Authentication configuration"""

    @staticmethod
    def get_auth_secret() -> str:
        """Get the AUTH_SECRET from settings"""
        if not settings.AUTH_SECRET:
            raise ValueError("AUTH_SECRET environment variable is not set")
        return settings.AUTH_SECRET

    @staticmethod
    def get_jwt_algorithm() -> str:
        """JWT algorithm used by NextAuth"""
        return "HS256"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


def decode_nextauth_token(token: str) -> dict:
    """
    Decode and validate a NextAuth JWT token.

    NextAuth JWT structure:
    {
        "name": "Jane",
        "email": "jane@example.com",
        "sub": "user_id",
        "id": "user_id",
        "role": "admin",
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            AuthConfig.get_auth_secret(),
            algorithms=[AuthConfig.get_jwt_algorithm()],
            options={"verify_aud": False}  # NextAuth doesn't set audience by default
        )
    except JWTError as e:
        if "expired" in str(e).lower():
            raise _unauthorized("Token has expired")
        raise _unauthorized(f"Invalid token: {str(e)}")


def extract_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Bearer header first, then the NextAuth session cookie"""
    if credentials:
        return credentials.credentials
    for cookie_name in SESSION_COOKIES:
        token = request.cookies.get(cookie_name)
        if token:
            return token
    return None


def user_from_payload(payload: dict) -> Optional[TokenUser]:
    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        return None

    return TokenUser(
        id=user_id,
        email=email,
        name=payload.get("name"),
        role=payload.get("role", "user")
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from the session JWT.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    token = extract_session_token(request, credentials)
    if not token:
        raise _unauthorized("Unauthorized")

    user = user_from_payload(decode_nextauth_token(token))
    if user is None:
        raise _unauthorized("Invalid token payload: missing user id or email")

    return user


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """
    Optional authentication - returns None if no valid token provided.

    Used by storefront-facing reads (`?public=true`).
    """
    token = extract_session_token(request, credentials)
    if not token:
        return None

    try:
        return user_from_payload(decode_nextauth_token(token))
    except HTTPException:
        return None


def is_internal_call(request: Request) -> bool:
    """True when the request carries the shared internal API token"""
    expected = settings.INTERNAL_API_TOKEN
    provided = request.headers.get(INTERNAL_CALL_HEADER)
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided, expected)


async def require_session_or_internal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """
    AI endpoints accept either a dashboard session or an internal call
    from the actions dispatcher.
    """
    if is_internal_call(request):
        return None
    return await get_current_user(request, credentials)
