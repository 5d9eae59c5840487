"""VERICID HTTP API."""
