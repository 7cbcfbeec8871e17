"""Guided dictation driven by a spoken confirmation marker.

The operator says "référence vis M6x20 OK", then "5 plus 10 OK": every
confirmed segment either opens a container, selects the active reference,
or is evaluated as arithmetic and added as a line for that reference.
"""

import logging
import re
from typing import Iterable

from container_counter.dictation.aggregate import QuantityLine, subtotal_key, subtotals
from container_counter.dictation.base import ContainerBackend, ParsedLine, SessionAction
from container_counter.dictation.expression import evaluate, normalize_math_speech

logger = logging.getLogger("container_counter")

DEFAULT_CONTAINER_LABEL = "Contenant 001"

CONFIRMATION_RE = re.compile(r"\b(?:ok|okay|okey|d['’]accord|dac)\b", re.IGNORECASE)
_CONTAINER_PREFIX_RE = re.compile(r"^\s*(?:contenant|container|carton|bac)\b\s*", re.IGNORECASE)
_REFERENCE_PREFIX_RE = re.compile(r"^\s*(?:référence|reference|ref|article)\b\s*", re.IGNORECASE)


class StreamingSession:
    """Buffers transcript fragments and dispatches each confirmed segment.

    Without a backend the session only records lines locally, which is
    enough to drive it from tests or a batch job. With a backend, container
    creation and added lines are forwarded to it; a failing backend call is
    reported in ``last_status`` and never rolls the buffer back.
    """

    def __init__(
        self,
        backend: ContainerBackend | None = None,
        container_ref: str | None = None,
        container_label: str = DEFAULT_CONTAINER_LABEL,
        lines: Iterable[QuantityLine] = (),
    ):
        self._backend = backend
        self._container_ref = container_ref
        self._container_label = container_label
        self._lines: list[ParsedLine] = [
            ParsedLine(item_label=line.item_label, quantity=line.quantity) for line in lines
        ]
        self._buffer = ""
        self._active_item_label = ""
        self._expression_draft = ""
        self._last_status = ""

    # --- observers

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def active_item_label(self) -> str:
        return self._active_item_label

    @property
    def last_status(self) -> str:
        return self._last_status

    @property
    def expression_draft(self) -> str:
        return self._expression_draft

    @property
    def container_ref(self) -> str | None:
        return self._container_ref

    @property
    def container_label(self) -> str:
        return self._container_label

    @property
    def lines(self) -> list[ParsedLine]:
        return list(self._lines)

    def current_subtotal(self, item_label: str | None = None) -> int | float:
        label = self._active_item_label if item_label is None else item_label
        if not label.strip():
            return 0
        return subtotals(self._lines).get(subtotal_key(label), 0)

    # --- commands

    def ingest(self, fragment: str) -> list[SessionAction]:
        """Append a transcript fragment and dispatch every confirmed segment."""
        self._buffer = f"{self._buffer} {fragment or ''}".strip()

        actions: list[SessionAction] = []
        while True:
            m = CONFIRMATION_RE.search(self._buffer)
            if not m:
                break
            segment = self._buffer[:m.start()].strip()
            self._buffer = self._buffer[m.end():].strip()

            action = self._dispatch(segment)
            if action is not None:
                actions.append(action)
        return actions

    def reset(self) -> None:
        self._buffer = ""
        self._active_item_label = ""
        self._expression_draft = ""
        self._last_status = ""

    # --- dispatch

    def _dispatch(self, segment: str) -> SessionAction | None:
        if not segment:
            self._last_status = "Segment vide ignoré"
            return None

        m = _CONTAINER_PREFIX_RE.match(segment)
        if m:
            return self._open_container(segment[m.end():].strip() or self._container_label)

        m = _REFERENCE_PREFIX_RE.match(segment)
        if m:
            return self._set_reference(segment[m.end():].strip())

        return self._add_calculation(segment)

    def _open_container(self, label: str) -> SessionAction | None:
        if self._backend is not None:
            try:
                ref = self._backend.create_container(label)
            except Exception as e:
                logger.warning(
                    "Container creation failed",
                    extra={"extra_data": {"label": label, "error": str(e)}},
                )
                self._last_status = f"Erreur création contenant: {e}"
                return None
            self._container_ref = ref

        self._container_label = label
        self._lines = []
        self._active_item_label = ""
        self._expression_draft = ""
        self._last_status = f"Contenant créé: {label}"
        return SessionAction(kind="create_container", container_label=label)

    def _set_reference(self, label: str) -> SessionAction | None:
        if not label:
            self._last_status = "Référence vide (dis: « référence … OK »)"
            return None

        self._active_item_label = label
        self._expression_draft = ""
        self._last_status = f"Référence active: {label}"
        return SessionAction(kind="set_reference", item_label=label)

    def _add_calculation(self, segment: str) -> SessionAction | None:
        item_label = self._active_item_label
        if not item_label.strip():
            self._last_status = (
                "Aucune référence active. Dis « référence … OK » puis ton calcul "
                f"« 5 plus 10 … OK ». (segment: « {segment} »)"
            )
            return None

        expr = normalize_math_speech(segment)
        self._expression_draft = expr

        result = evaluate(expr)
        if not result.ok:
            self._last_status = f"Erreur calcul: {result.error} (segment: « {segment} »)"
            return None
        if result.value <= 0:
            self._last_status = f"Résultat <= 0 ({result.value}) : rien ajouté."
            return None

        if self._backend is not None:
            if self._container_ref is None:
                self._last_status = "Aucun contenant actif. Dis « contenant … OK » d'abord."
                return None
            try:
                self._backend.add_line(self._container_ref, item_label, result.value)
            except Exception as e:
                logger.warning(
                    "Line add failed",
                    extra={"extra_data": {
                        "container_ref": self._container_ref,
                        "item_label": item_label,
                        "error": str(e),
                    }},
                )
                self._last_status = f"Erreur ajout: {e}"
                return None

        self._lines.append(ParsedLine(item_label=item_label, quantity=result.value))
        self._expression_draft = ""
        self._last_status = f"Ajout: {result.value} × {item_label}"
        return SessionAction(kind="add_line", item_label=item_label, quantity=result.value)
