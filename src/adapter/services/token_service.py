"""PyJWT implementation of TokenService"""

from datetime import datetime, timedelta, timezone
import jwt
from libs.result import Result, Return, Error
from src.app.services.token_service import TokenService, TokenClaims
from src.domain.user import User


class JwtTokenService(TokenService):
    """
    HS256 bearer tokens

    Payload: user_id, username, email, is_verified, exp
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expiration_hours: int = 24):
        self.secret = secret
        self.algorithm = algorithm
        self.expiration_hours = expiration_hours

    def issue(self, user: User) -> str:
        payload = {
            "user_id": user.id,
            "username": user.username,
            "email": user.email,
            "is_verified": bool(user.is_verified),
            "exp": datetime.now(timezone.utc) + timedelta(hours=self.expiration_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Result[TokenClaims]:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            return Return.err(Error(code="TOKEN_EXPIRED", message="Token expired"))
        except jwt.InvalidTokenError as e:
            return Return.err(
                Error(code="INVALID_TOKEN", message="Invalid token", reason=str(e))
            )

        user_id = payload.get("user_id")
        if not user_id or not isinstance(user_id, str):
            return Return.err(Error(code="INVALID_TOKEN", message="Invalid token payload"))

        return Return.ok(
            TokenClaims(
                user_id=user_id,
                username=payload.get("username", ""),
                email=payload.get("email", ""),
                is_verified=bool(payload.get("is_verified", False)),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        )
