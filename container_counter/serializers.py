from container_counter.dictation.base import ParsedLine, SessionAction, SummaryLine
from container_counter.models import Container, ContainerLine
from container_counter.sessions import SessionEntry


def _quantity(value: int | float | None) -> int | float | None:
    """Stored quantities are floats; integral ones go out as ints."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def serialize_parsed_line(line: ParsedLine) -> dict:
    return {
        "itemLabel": line.item_label,
        "quantity": _quantity(line.quantity),
    }


def serialize_line(line: ContainerLine) -> dict:
    return {
        "id": line.id,
        "itemLabel": line.item_label,
        "quantity": _quantity(line.quantity),
    }


def serialize_container(container: Container) -> dict:
    return {
        "id": container.id,
        "label": container.label,
        "lines": [serialize_line(l) for l in container.lines],
    }


def serialize_summary(summary: list[SummaryLine]) -> list[dict]:
    return [
        {"itemLabel": s.item_label, "totalQuantity": _quantity(s.total_quantity)}
        for s in summary
    ]


def serialize_action(action: SessionAction) -> dict:
    data = {"kind": action.kind}
    if action.container_label is not None:
        data["containerLabel"] = action.container_label
    if action.item_label is not None:
        data["itemLabel"] = action.item_label
    if action.quantity is not None:
        data["quantity"] = _quantity(action.quantity)
    return data


def serialize_session(entry: SessionEntry, actions: list[SessionAction] | None = None) -> dict:
    session = entry.session
    data = {
        "id": entry.session_id,
        "containerId": session.container_ref,
        "containerLabel": session.container_label,
        "buffer": session.buffer,
        "activeItemLabel": session.active_item_label,
        "lastStatus": session.last_status,
        "expressionDraft": session.expression_draft,
        "currentSubtotal": _quantity(session.current_subtotal()),
    }
    if actions is not None:
        data["actions"] = [serialize_action(a) for a in actions]
    return data
