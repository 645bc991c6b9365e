"""Failure taxonomy for rate fetching and conversion.

ProviderError is raised by RateProvider implementations only. The converter
translates it into ProviderUnavailable so routers and exception handlers deal
with a single hierarchy rooted at ConversionError.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Upstream fetch failed (network, timeout, bad status, bad payload)."""


class ConversionError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ProviderUnavailable(ConversionError):
    status_code = 503
    message = "Service unavailable. Unable to fetch exchange rates."


class UnknownCurrency(ConversionError):
    status_code = 400

    def __init__(self, code: str, base: str):
        self.code = code
        self.base = base
        super().__init__(f"Currency code '{code}' not found for base '{base}'")
