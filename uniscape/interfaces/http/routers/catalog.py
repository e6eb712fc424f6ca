"""Public catalogue of bookable trips and shuttle routes."""
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from uniscape.core.container import ApplicationContainer
from uniscape.interfaces.http.deps import get_app_container, get_db_session
from uniscape.interfaces.http.errors import to_http_exception
from uniscape.modules.common import ServiceError
from uniscape.modules.inventory import InventoryService
from uniscape.schemas import InventoryItemListResponse, InventoryItemResponse

router = APIRouter()


@router.get("/items", response_model=InventoryItemListResponse, summary="List active trips and shuttles")
async def list_items(
    kind: Optional[Literal["trip", "transport"]] = None,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InventoryItemListResponse:
    items = await InventoryService.with_session(db, container).list_items(kind=kind, active_only=True)
    return InventoryItemListResponse(items=[InventoryItemResponse.model_validate(item) for item in items])


@router.get("/items/{item_id}", response_model=InventoryItemResponse, summary="Get one item")
async def get_item(
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> InventoryItemResponse:
    try:
        item = await InventoryService.with_session(db, container).get_item(item_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return InventoryItemResponse.model_validate(item)
