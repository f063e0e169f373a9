from typing import List

from fastapi import APIRouter

from fxboard.models.constants import SUPPORTED_CURRENCIES

router = APIRouter(prefix="/currencies", tags=["currencies"])


@router.get("", response_model=List[str], summary="Supported currency codes")
async def list_currencies():
    return list(SUPPORTED_CURRENCIES)
