"""
Shared utilities for the Result Generator.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

from resultgen.config import MIN_WORKERS


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- File Operations ---
def atomic_write_bytes(data: bytes, path: Path) -> None:
    """
    Write bytes to a file atomically using a temporary file.

    This prevents a half-written output if the write is interrupted.

    Args:
        data: Raw content to write
        path: Destination path
    """
    logger = setup_logging(__name__)

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temp file first
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='wb',
            delete=False,
            suffix=path.suffix,
            dir=path.parent  # Same filesystem for atomic move
        ) as tmp:
            tmp.write(data)
            tmp_path = Path(tmp.name)

        # Atomic move (rename) to final destination
        shutil.move(str(tmp_path), str(path))
        logger.debug(f"Atomically wrote {len(data)} bytes to {path}")

    except Exception:
        # Clean up temp file if it exists
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_text(text: str, path: Path, encoding: str = "utf-8") -> None:
    """Write text to a file atomically (see atomic_write_bytes)."""
    atomic_write_bytes(text.encode(encoding), path)


# --- Validation ---
def validate_input_size(text: str, max_size: int) -> None:
    """
    Validate that input text does not exceed maximum size.

    Args:
        text: Input text to validate
        max_size: Maximum allowed size in bytes

    Raises:
        ValueError: If input exceeds max_size
    """
    size = len(text.encode("utf-8"))
    if size > max_size:
        raise ValueError(
            f"Input too large: {size:,} bytes. "
            f"Maximum allowed: {max_size:,} bytes"
        )


# --- Worker Pool ---
def default_worker_count() -> int:
    """Default pool size: available processors, never below MIN_WORKERS."""
    return max(MIN_WORKERS, os.cpu_count() or 1)


__all__ = [
    # Logging
    'setup_logging',
    # File operations
    'atomic_write_bytes',
    'atomic_write_text',
    # Validation
    'validate_input_size',
    # Worker pool
    'default_worker_count',
]
