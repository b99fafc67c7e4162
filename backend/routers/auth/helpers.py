from passlib.context import CryptContext
from config import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_ACCESS_TOKEN_EXPIRE_MINUTES
from utils.errors import ValidationError, UnauthorizedError, InternalError
from datetime import datetime, timedelta, timezone
from typing import Optional
import secrets
import jwt
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
VERIFICATION_CODE_DIGITS = 6


class AuthHelpers:
    """Helper functions for authentication operations"""

    def __init__(self, secret: Optional[str] = None, expire_minutes: int = JWT_ACCESS_TOKEN_EXPIRE_MINUTES):
        self._secret = secret
        self.expire_minutes = expire_minutes
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @property
    def secret(self) -> str:
        secret = self._secret or JWT_SECRET_KEY
        if not secret:
            raise InternalError("JWT secret is not configured")
        return secret

    def hash_password(self, password: str) -> str:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "password must be at least 8 characters long",
                "Validation failed"
            )
        return self.pwd_context.hash(password)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        if len(password) < MIN_PASSWORD_LENGTH:
            return False
        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            logger.warning("Stored password hash could not be identified")
            return False

    def create_access_token(self, user_id: int, email: str, role: str, now: Optional[datetime] = None) -> str:
        if not user_id or not email or not role:
            raise InternalError("failed to generate token", "invalid user id, email or role")

        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str) -> dict:
        """
        Verify JWT locally and return the caller identity carried in its claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp"]}
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token expired")
            raise UnauthorizedError("authorization failed", "token is expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token: {str(e)}")
            raise UnauthorizedError("authorization failed", "invalid token")

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise UnauthorizedError("authorization failed", "invalid token claims")

        if user_id <= 0:
            raise UnauthorizedError("authorization failed", "invalid token claims")

        return {
            "user_id": user_id,
            "email": payload.get("email"),
            "role": payload.get("role"),
        }

    def generate_verification_code(self) -> str:
        return str(secrets.randbelow(10 ** VERIFICATION_CODE_DIGITS)).zfill(VERIFICATION_CODE_DIGITS)


auth_helpers = AuthHelpers()
