"""Pydantic wire models for the currency conversion API."""

from .constants import CURRENCY_CODE_LENGTH
from .currency import ConversionOut, ErrorOut, HealthOut

__all__ = [
    "CURRENCY_CODE_LENGTH",
    "ConversionOut",
    "ErrorOut",
    "HealthOut",
]
