import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise.contrib.fastapi import register_tortoise

from airdrop.core.config import settings
from airdrop.core.errors import ClaimError
from airdrop.api import health, airdrop_router
from airdrop.schemas.airdrop import ErrorResponse
from airdrop.services.airdrop import airdrop_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    if airdrop_service.is_configured():
        logger.info("Airdrop engine ready")
    else:
        logger.warning("Airdrop is not configured; claim endpoints will answer 503")
    yield


app = FastAPI(
    title=settings.app_name,
    description="""
    Airdrop Claims API

    Eligible recipients redeem a pre-allocated token entitlement exactly once,
    using either of two proofs:
    - a Merkle membership proof of (recipient, amount) against the committed root
    - an EIP-712 Claim(claimer, amount) signature from the trusted signer

    The owner can permanently disable signature claims; Merkle claims stay available.

    ## Claim Flow

    1. Caller requests `GET /api/v1/airdrop/message?wallet_address=...`
    2. Caller signs the challenge with its wallet (personal_sign)
    3. Caller submits `POST /api/v1/airdrop/claim/merkle` or `/claim/signature`
       with the challenge signature and its proof
    4. Backend verifies the proof, records the claim and pays out from the pool
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ClaimError)
async def claim_error_handler(request: Request, exc: ClaimError) -> JSONResponse:
    """Every rejected operation maps to a distinct error code."""
    body = ErrorResponse(error=exc.code, detail=exc.message, data=exc.details or None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# Include routers
app.include_router(health.router)
app.include_router(airdrop_router.router, prefix=settings.api_v1_prefix)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "api": f"{settings.api_v1_prefix}/airdrop",
    }


# Register Tortoise ORM with FastAPI
register_tortoise(
    app,
    config=settings.tortoise_config,
    generate_schemas=True,
    add_exception_handlers=True,
)
