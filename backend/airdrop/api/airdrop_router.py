from fastapi import APIRouter

from airdrop.api.airdrop_endpoints.admin import router as admin_router
from airdrop.api.airdrop_endpoints.claims import router as claims_router
from airdrop.api.airdrop_endpoints.state import router as state_router

router = APIRouter(prefix="/airdrop", tags=["airdrop"])

router.include_router(state_router)
router.include_router(claims_router)
router.include_router(admin_router)
