"""Health check endpoint."""

import logging

from fastapi import APIRouter, Depends

from vericid.api.dependencies import get_fetcher, get_index
from vericid.api.models import HealthResponse
from vericid.config import get_config
from vericid.sources.fetcher import ProvenanceFetcher
from vericid.sources.index import InMemoryOriginIndex

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(
    fetcher: ProvenanceFetcher = Depends(get_fetcher),
    index: InMemoryOriginIndex = Depends(get_index),
):
    """Report configured sources and index size."""
    config = get_config()
    status = "healthy" if fetcher.sources else "degraded"

    return HealthResponse(
        status=status,
        sources_configured=len(fetcher.sources),
        indexed_identifiers=len(index),
        hash_function=config.hash_algorithm,
    )
