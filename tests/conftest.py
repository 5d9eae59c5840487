"""Shared test fixtures for VERICID test suite."""

import os
from pathlib import Path

import pytest

# Ensure test environment variables are set before any config import
os.environ["VERICID_API_KEY"] = ""
os.environ.setdefault("VERICID_SOURCE_URLS", "")
os.environ.setdefault("VERICID_LOG_LEVEL", "WARNING")
os.environ.setdefault("VERICID_CONFIG_FILE", "tests/does-not-exist.yaml")


# Golden vectors for b"hello" hashed with sha2-256
HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
HELLO_CID_V0 = "QmRN6wdp1S2A5EtjW9A3M1vKSBuQQGcgvuhoMUoEz4iiT5"
HELLO_CID_V1 = "bafkreibm6jg3ux5qumhcn2b3flc3tyu6dmlb4xa7u5bf44yegnrjhc4yeq"

# dag-pb CID from the lookup worker's sample data
WORKER_SAMPLE_CID = "bafybeibc5sgo2plmjkq2tzmhrn54bk3crhnc23zd2msg4ea7a4pxrkgfna"

EXAMPLE_INDEX = Path(__file__).resolve().parent.parent / "data" / "origin_index.example.json"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the config and API singletons around every test."""
    import vericid.config
    from vericid.api import dependencies

    vericid.config._config = None
    dependencies.reset()
    yield
    vericid.config._config = None
    dependencies.reset()


@pytest.fixture
def worker_origins():
    """The two origins the lookup worker returns for its sample CID."""
    return [
        {
            "network": "ethereum",
            "address": "0xBd3531dA5CF5857e7CfAA92426877b022e612cf8",
            "metadata": {"type": "NFT", "standard": "ERC721"},
            "timestamp": "2025-08-07T16:14:00.238Z",
        },
        {
            "network": "base",
            "address": "0xBd3531dA5CF5857e7CfAA92426877b022e612cf7",
            "metadata": {"type": "NFT", "standard": "ERC721"},
            "timestamp": "2025-08-07T16:14:00.245Z",
        },
    ]


@pytest.fixture
def mixed_origins():
    """Origins across networks, with a duplicate, a malformed row and no-timestamp rows."""
    return [
        {"network": "ethereum", "address": "0xA", "timestamp": "2025-01-01T00:00:00Z"},
        {"network": "polygon", "address": "0xB", "timestamp": "2025-03-01T00:00:00Z"},
        {"network": "Ethereum", "address": "0xA", "timestamp": "2025-02-01T00:00:00Z"},
        {"network": "", "address": "0xC"},
        {"network": "solana", "address": "So1", "timestamp": None},
        {"network": "tezos", "address": "tz1"},
        {"network": "base", "address": "0xD", "timestamp": "2025-03-01T00:00:00Z"},
    ]
