"""Pydantic models and the cross-product lesson validator."""
