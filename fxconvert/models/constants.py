"""Validation constants shared by routers and models."""

CURRENCY_CODE_LENGTH: int = 3
