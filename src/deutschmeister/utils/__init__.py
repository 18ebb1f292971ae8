"""
Shared utilities for the lesson engine.

- file_io.py: JSON reading/writing and file listing
- logging_config.py: Structured JSON logging for CLI runs
- text_normalization.py: Answer normalization and matching
"""

__all__ = [
    "file_io",
    "logging_config",
    "text_normalization",
]
