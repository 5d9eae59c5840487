"""Pydantic request/response models for the VERICID API.

Field names are snake_case in Python and camelCase on the wire, matching
the lookup worker's JSON contract.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vericid.provenance.models import AggregationResult, format_timestamp


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class LookupRequest(_WireModel):
    cid_v0: str | None = Field(default=None, alias="cidV0", max_length=256)
    cid_v1: str | None = Field(default=None, alias="cidV1", max_length=256)

    @field_validator("cid_v0", "cid_v1", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class OriginItem(_WireModel):
    network: str
    address: str
    metadata: dict[str, str] = {}
    timestamp: str | None = None
    explorer_url: str | None = Field(default=None, alias="explorerUrl")


class SearchedCIDs(_WireModel):
    v0: str | None = None
    v1: str | None = None


class FailedSource(_WireModel):
    source: str
    identifier: str
    error: str | None = None


class LookupMetadata(_WireModel):
    total_origins: int = Field(default=0, alias="totalOrigins")
    last_found: str | None = Field(default=None, alias="lastFound")
    trust_tier: str = Field(default="low", alias="trustTier")
    searched_cids: SearchedCIDs = Field(default_factory=SearchedCIDs, alias="searchedCIDs")
    failed_sources: list[FailedSource] = Field(default_factory=list, alias="failedSources")
    all_sources_failed: bool = Field(default=False, alias="allSourcesFailed")


class LookupResponse(_WireModel):
    cid: str
    origins: list[OriginItem] = []
    metadata: LookupMetadata

    @classmethod
    def from_result(
        cls,
        result: AggregationResult,
        cid_v0: str | None,
        cid_v1: str | None,
    ) -> "LookupResponse":
        report = result.report
        return cls(
            cid=report.identifier,
            origins=[
                OriginItem(
                    network=o.network,
                    address=o.address,
                    metadata=dict(o.metadata),
                    timestamp=format_timestamp(o.observed_at),
                    explorer_url=o.explorer_url,
                )
                for o in report.origins
            ],
            metadata=LookupMetadata(
                total_origins=report.total_origins,
                last_found=format_timestamp(report.last_found),
                trust_tier=report.trust_tier.value,
                searched_cids=SearchedCIDs(v0=cid_v0, v1=cid_v1),
                failed_sources=[
                    FailedSource(source=f.source, identifier=f.identifier, error=f.error)
                    for f in result.failures
                ],
                all_sources_failed=result.all_failed,
            ),
        )


# ---------------------------------------------------------------------------
# CID computation
# ---------------------------------------------------------------------------

class CidResponse(_WireModel):
    cid_v0: str = Field(alias="cidV0")
    cid_v1: str = Field(alias="cidV1")
    digest: str
    hash_function: str = Field(alias="hashFunction")
    size: int


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "healthy"
    sources_configured: int = 0
    indexed_identifiers: int = 0
    hash_function: str = ""
