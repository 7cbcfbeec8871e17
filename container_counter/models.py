import secrets
from datetime import datetime

from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from container_counter.database import Base


def new_id() -> str:
    return secrets.token_urlsafe(7)  # 10 chars


class Container(Base):
    __tablename__ = "containers"

    id = Column(String(16), primary_key=True, default=new_id)
    label = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    lines = relationship(
        "ContainerLine",
        back_populates="container",
        cascade="all, delete-orphan",
        order_by="ContainerLine.position",
        lazy="selectin",
    )


class ContainerLine(Base):
    __tablename__ = "container_lines"

    id = Column(String(16), primary_key=True, default=new_id)
    container_id = Column(String(16), ForeignKey("containers.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # insertion order within the container
    item_label = Column(String(255), nullable=False)
    quantity = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    container = relationship("Container", back_populates="lines")
