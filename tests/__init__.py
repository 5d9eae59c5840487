"""
Test suite for VERICID

- Unit tests for the CID codec (varint, multibase, multihash, encoder)
- Unit tests for hashing, aggregation and network links
- Source client and fetch layer tests with mocked HTTP
- API endpoint and CLI tests
"""
