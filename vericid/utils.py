"""
Utility functions for VERICID

Provides logging setup, the exception hierarchy, and JSON file helpers
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Configure logging for VERICID"""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# FILE I/O
# ═══════════════════════════════════════════════════════════════════

def read_json(file_path: str | Path) -> Any:
    """Read JSON file"""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(data: Any, file_path: str | Path, indent: int = 2) -> None:
    """Write JSON file"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════

class VericidError(Exception):
    """Base exception for VERICID"""
    pass


class UnsupportedCodec(VericidError, ValueError):
    """Content codec is not in the codec table"""
    pass


class UnsupportedHashCode(VericidError, ValueError):
    """Hash function code or name is not in the multihash table"""
    pass


class InvalidCIDError(VericidError, ValueError):
    """CID string could not be decoded"""
    pass


class HashInputError(VericidError, IOError):
    """Input bytes could not be fully read while hashing"""
    pass


class SourceLookupError(VericidError, ConnectionError):
    """Provenance source could not be reached after all retries"""

    def __init__(self, message: str, attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts
