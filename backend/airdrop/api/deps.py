"""
API dependencies.

Endpoints receive the claim engine through `Depends(get_airdrop)` so tests
can swap in their own instance via `app.dependency_overrides`.
"""

import logging

from fastapi import HTTPException, status

from airdrop.claims.engine import Airdrop
from airdrop.core.errors import MalformedClaim
from airdrop.services.airdrop import airdrop_service

logger = logging.getLogger(__name__)


def get_airdrop() -> Airdrop:
    try:
        return airdrop_service.airdrop
    except (ValueError, MalformedClaim) as e:
        logger.error(f"Airdrop is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Airdrop is not configured",
        )
