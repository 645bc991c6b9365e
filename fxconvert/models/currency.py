from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from fxconvert.services.rates.conversion import ConversionResult


class ConversionOut(BaseModel):
    """Wire shape of a successful conversion (camelCase keys)."""

    model_config = ConfigDict(populate_by_name=True)

    from_currency: str = Field(..., alias="from")
    to_currency: str = Field(..., alias="to")
    amount: float
    rate: float
    converted_amount: float = Field(..., alias="convertedAmount")
    cached: bool

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionOut":
        return cls(
            from_currency=result.from_currency,
            to_currency=result.to_currency,
            amount=result.amount,
            rate=result.rate,
            converted_amount=result.converted_amount,
            cached=result.served_from_cache,
        )


class ErrorOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    status: str
    cached_bases: list[str]
