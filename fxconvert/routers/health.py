from fastapi import APIRouter, Depends

from fxconvert.models.currency import HealthOut
from fxconvert.routers.currency import get_converter
from fxconvert.services.rates.conversion import Converter

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut, summary="Liveness probe")
async def health(converter: Converter = Depends(get_converter)) -> HealthOut:
    return HealthOut(status="ok", cached_bases=converter.store.bases())
