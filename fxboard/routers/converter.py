"""Converter router exposing the conversion state to the presentation layer.

Mutating endpoints return the snapshot immediately; a fetch they trigger keeps
running in the background and shows up as ``loading=true`` until it lands.
Use ``GET /converter?wait=true`` to block until outstanding fetches settle.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from fxboard.models.rates import AmountIn, ConverterView, CurrencyIn
from fxboard.services.conversion_state import ConversionState

router = APIRouter(prefix="/converter", tags=["converter"])


def get_converter(request: Request) -> ConversionState:
    return request.app.state.converter


@router.get("", response_model=ConverterView, summary="Current converter snapshot")
async def read_converter(
    wait: bool = Query(False, description="Wait for outstanding rate fetches first"),
    state: ConversionState = Depends(get_converter),
):
    if wait:
        await state.wait_idle()
    return state.snapshot()


@router.put("/amount", response_model=ConverterView, summary="Set the input amount")
async def set_amount(
    payload: AmountIn, state: ConversionState = Depends(get_converter)
):
    state.set_amount(payload.amount)
    return state.snapshot()


@router.put("/base", response_model=ConverterView, summary="Select base currency")
async def set_base(payload: CurrencyIn, state: ConversionState = Depends(get_converter)):
    state.set_base_currency(payload.currency)
    return state.snapshot()


@router.put("/target", response_model=ConverterView, summary="Select target currency")
async def set_target(
    payload: CurrencyIn, state: ConversionState = Depends(get_converter)
):
    state.set_target_currency(payload.currency)
    return state.snapshot()


@router.post("/swap", response_model=ConverterView, summary="Swap base and target")
async def swap(state: ConversionState = Depends(get_converter)):
    state.swap()
    return state.snapshot()


@router.post(
    "/favorite",
    response_model=ConverterView,
    summary="Toggle the (in-memory, unsaved) favorite flag",
)
async def toggle_favorite(state: ConversionState = Depends(get_converter)):
    state.toggle_favorite()
    return state.snapshot()
