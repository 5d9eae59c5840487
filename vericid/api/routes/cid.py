"""CID endpoint - compute v0/v1 identifiers for an uploaded body."""

import logging

from fastapi import APIRouter, Depends, Request

from vericid.api.auth import require_api_key
from vericid.api.dependencies import get_encoder, get_engine
from vericid.api.models import CidResponse
from vericid.cid.encoder import CIDEncoder
from vericid.cid.hashing import HashEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["cid"], dependencies=[Depends(require_api_key)])


@router.post("/cid", response_model=CidResponse)
async def compute_cid(
    request: Request,
    engine: HashEngine = Depends(get_engine),
    encoder: CIDEncoder = Depends(get_encoder),
) -> CidResponse:
    """Hash the request body as it streams in and return both CID forms."""
    builder = engine.incremental()
    async for chunk in request.stream():
        if chunk:
            builder.update(chunk)
    digest = builder.finish()
    cids = encoder.encode(digest)
    logger.info("Computed %s for %d byte(s)", cids.v1, builder.size)
    return CidResponse(
        cid_v0=cids.v0,
        cid_v1=cids.v1,
        digest=digest.hex(),
        hash_function=digest.algorithm,
        size=builder.size,
    )
