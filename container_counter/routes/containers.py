import math

from fastapi import APIRouter, Depends, HTTPException

from container_counter.deps import get_container_or_404, get_store
from container_counter.schemas import CreateContainerIn, LineIn, UpdateLineIn
from container_counter.serializers import serialize_container, serialize_summary
from container_counter.store import ContainerStore, NotFoundError

router = APIRouter()


def _validate_quantity(quantity: float) -> None:
    if not math.isfinite(quantity) or quantity <= 0:
        raise HTTPException(status_code=400, detail="quantity must be a positive number")


@router.post("/containers", status_code=201)
def create_container(data: CreateContainerIn, store: ContainerStore = Depends(get_store)):
    label = data.label.strip()
    if not label:
        raise HTTPException(status_code=400, detail="label is required")
    return serialize_container(store.create_container(label))


@router.get("/containers/{container_id}")
def get_container(container_id: str, store: ContainerStore = Depends(get_store)):
    return serialize_container(get_container_or_404(container_id, store))


@router.post("/containers/{container_id}/lines")
def add_line(container_id: str, data: LineIn, store: ContainerStore = Depends(get_store)):
    get_container_or_404(container_id, store)

    item_label = data.item_label.strip()
    if not item_label:
        raise HTTPException(status_code=400, detail="itemLabel is required")
    _validate_quantity(data.quantity)

    try:
        container = store.add_line(container_id, item_label, data.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return serialize_container(container)


@router.put("/containers/{container_id}/lines/{line_id}")
def update_line(
    container_id: str,
    line_id: str,
    data: UpdateLineIn,
    store: ContainerStore = Depends(get_store),
):
    get_container_or_404(container_id, store)

    item_label = None
    if data.item_label is not None:
        item_label = data.item_label.strip()
        if not item_label:
            raise HTTPException(status_code=400, detail="itemLabel cannot be empty")
    if data.quantity is not None:
        _validate_quantity(data.quantity)

    try:
        container = store.update_line(container_id, line_id, item_label=item_label, quantity=data.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return serialize_container(container)


@router.get("/containers/{container_id}/summary")
def get_summary(container_id: str, store: ContainerStore = Depends(get_store)):
    try:
        summary = store.get_summary(container_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return serialize_summary(summary)
