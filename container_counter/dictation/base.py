from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict


class ParsedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_label: str
    quantity: int | float  # always > 0


class SummaryLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_label: str
    total_quantity: int | float


class SessionAction(BaseModel):
    """What a confirmed dictation segment did."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["create_container", "set_reference", "add_line"]
    container_label: str | None = None
    item_label: str | None = None
    quantity: int | float | None = None


class ContainerBackend(Protocol):
    def create_container(self, label: str) -> str: ...

    def add_line(self, container_ref: str, item_label: str, quantity: int | float) -> None: ...
