"""Lookup endpoint - where has a CID been seen before."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from vericid.api.auth import require_api_key
from vericid.api.dependencies import get_aggregator, get_encoder, get_fetcher
from vericid.api.models import LookupRequest, LookupResponse
from vericid.cid.encoder import CIDEncoder
from vericid.config import get_config
from vericid.provenance.aggregator import ProvenanceAggregator
from vericid.sources.fetcher import ProvenanceFetcher
from vericid.utils import InvalidCIDError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["lookup"], dependencies=[Depends(require_api_key)])


@router.post("/lookup", response_model=LookupResponse)
def lookup(
    body: LookupRequest,
    fetcher: ProvenanceFetcher = Depends(get_fetcher),
    encoder: CIDEncoder = Depends(get_encoder),
    aggregator: ProvenanceAggregator = Depends(get_aggregator),
) -> LookupResponse:
    """Look up both CID versions and return deduplicated, ranked origins.

    The response is keyed by the v1 CID when one is given, else by v0.
    """
    if not body.cid_v0 and not body.cid_v1:
        raise HTTPException(status_code=400, detail="CID required")

    for value in (body.cid_v0, body.cid_v1):
        if value:
            try:
                encoder.decode(value)
            except InvalidCIDError:
                raise HTTPException(status_code=400, detail=f"Invalid CID: {value}") from None

    identifiers = [c for c in (body.cid_v0, body.cid_v1) if c]
    results = fetcher.fetch(identifiers, deadline=get_config().fetch_deadline)
    result = aggregator.aggregate_results(body.cid_v1 or body.cid_v0, results)

    if result.all_failed:
        logger.warning("All %d lookup(s) failed for %s", result.sources_queried, result.report.identifier)

    return LookupResponse.from_result(result, body.cid_v0, body.cid_v1)
