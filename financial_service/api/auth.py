"""
Authentication and service dependencies
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from ..config import FinancialServiceConfig
from ..logging_config import get_logger
from ..service import FinancialService


# JWT Security
security = HTTPBearer(auto_error=False)

logger = get_logger("financial_service.api.auth")

ANONYMOUS_USER = "anonymous"


def get_service(request: Request) -> FinancialService:
    return request.app.state.service


def get_settings(request: Request) -> FinancialServiceConfig:
    return request.app.state.config


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    config: FinancialServiceConfig = Depends(get_settings),
) -> str:
    """Dependency that validates the bearer JWT and returns its subject"""
    if not config.auth_enabled:
        return ANONYMOUS_USER

    if not credentials:
        raise HTTPException(status_code=401, detail="Must be provided a bearer JWT token")
    try:
        payload = jwt.decode(
            credentials.credentials,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            audience=config.jwt_audience,
            issuer=config.jwt_issuer,
            options={"verify_aud": config.jwt_audience is not None},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid bearer JWT token provided")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user_id
