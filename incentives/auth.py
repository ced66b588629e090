"""
API key authentication for the incentives endpoints.
"""
import logging
import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from incentives.constants import API_KEY

logger = logging.getLogger("incentives.auth")

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str = Security(api_key_header)):
    """Reject requests without the configured X-API-Key header"""
    if not api_key or not secrets.compare_digest(api_key.encode(), API_KEY.encode()):
        logger.warning("Rejected request with missing or invalid API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return api_key
