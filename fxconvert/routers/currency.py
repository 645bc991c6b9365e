from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from fxconvert.models.constants import CURRENCY_CODE_LENGTH
from fxconvert.models.currency import ConversionOut, ErrorOut
from fxconvert.services.rates.conversion import Converter

"""Currency router.

Endpoints:
    - GET /currency/convert?amount=&from=&to= -> converted amount

Failures are raised as ConversionError subclasses and rendered by the handlers
registered in fxconvert.core.errors (400 unknown code, 503 provider down).
"""

router = APIRouter(prefix="/currency", tags=["currency"])


def get_converter(request: Request) -> Converter:
    return request.app.state.converter


@router.get(
    "/convert",
    response_model=ConversionOut,
    summary="Convert an amount between two currencies",
    responses={400: {"model": ErrorOut}, 503: {"model": ErrorOut}},
)
async def convert(
    amount: float = Query(..., ge=0, description="Non-negative amount to convert"),
    from_currency: str = Query(
        ...,
        alias="from",
        min_length=CURRENCY_CODE_LENGTH,
        max_length=CURRENCY_CODE_LENGTH,
        description="Base currency code (e.g. USD)",
    ),
    to_currency: str = Query(
        ...,
        alias="to",
        min_length=CURRENCY_CODE_LENGTH,
        max_length=CURRENCY_CODE_LENGTH,
        description="Target currency code (e.g. EUR)",
    ),
    converter: Converter = Depends(get_converter),
) -> ConversionOut:
    result = await converter.convert(amount, from_currency, to_currency)
    return ConversionOut.from_result(result)
