"""Container storage backing the HTTP layer and dictation sessions."""

import logging

from sqlalchemy.orm import sessionmaker

from container_counter.dictation.aggregate import aggregate
from container_counter.dictation.base import SummaryLine
from container_counter.models import Container, ContainerLine

logger = logging.getLogger("container_counter")


class NotFoundError(LookupError):
    pass


class ContainerStore:
    """Repository over containers and their lines.

    Returned objects are detached from the database session, with their
    lines already loaded.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_container(self, label: str) -> Container:
        with self._session_factory() as db:
            container = Container(label=label, lines=[])
            db.add(container)
            db.commit()
        logger.info("Container created", extra={"extra_data": {"container_id": container.id, "label": label}})
        return container

    def get_container(self, container_id: str) -> Container | None:
        with self._session_factory() as db:
            return db.get(Container, container_id)

    def add_line(self, container_id: str, item_label: str, quantity: float) -> Container:
        with self._session_factory() as db:
            container = db.get(Container, container_id)
            if container is None:
                raise NotFoundError("Container not found")
            container.lines.append(
                ContainerLine(item_label=item_label, quantity=quantity, position=len(container.lines))
            )
            db.commit()
        logger.info(
            "Line added",
            extra={"extra_data": {"container_id": container_id, "item_label": item_label, "quantity": quantity}},
        )
        return container

    def update_line(
        self,
        container_id: str,
        line_id: str,
        item_label: str | None = None,
        quantity: float | None = None,
    ) -> Container:
        with self._session_factory() as db:
            container = db.get(Container, container_id)
            if container is None:
                raise NotFoundError("Container not found")
            line = next((l for l in container.lines if l.id == line_id), None)
            if line is None:
                raise NotFoundError("Line not found")

            if item_label is not None:
                line.item_label = item_label
            if quantity is not None:
                line.quantity = quantity
            db.commit()
        return container

    def get_summary(self, container_id: str) -> list[SummaryLine]:
        container = self.get_container(container_id)
        if container is None:
            raise NotFoundError("Container not found")
        return aggregate(container.lines)
