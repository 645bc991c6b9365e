from __future__ import annotations

"""Rate provider abstraction.

A provider answers one question: "what is 1 unit of BASE worth in every other
currency it knows?". Implementations raise ProviderError for any failure; they
never return partial or fallback data.
"""
from abc import ABC, abstractmethod
from typing import Dict


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch_rates(self, base: str) -> Dict[str, float]:
        """Return target code -> units of target per 1 unit of base.

        Raises ProviderError when the rates cannot be obtained.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources; called once on application shutdown."""
        return None
