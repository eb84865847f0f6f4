from fastapi import APIRouter

from nft_oracle.api.v1.health import router as health_router
from nft_oracle.api.v1.tokens import router as tokens_router
from nft_oracle.api.v1.feed import router as feed_router
from nft_oracle.api.v1.oracle import router as oracle_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])

# ------------------------------------------------------------------
# PUBLIC READS
# ------------------------------------------------------------------
v1_router.include_router(tokens_router, tags=["tokens"])

# ------------------------------------------------------------------
# FEED WRITES / AUDIT
# ------------------------------------------------------------------
v1_router.include_router(feed_router, tags=["feed"])
v1_router.include_router(oracle_router, tags=["oracle"])
