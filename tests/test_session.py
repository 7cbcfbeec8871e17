"""Tests for the confirmation-driven dictation session."""

import pytest

from container_counter.dictation.base import ParsedLine, SessionAction
from container_counter.dictation.session import DEFAULT_CONTAINER_LABEL, StreamingSession


class FakeBackend:
    def __init__(self):
        self.containers: dict[str, str] = {}
        self.lines: list[tuple] = []
        self.fail_create = False
        self.fail_add = False

    def create_container(self, label):
        if self.fail_create:
            raise RuntimeError("store down")
        ref = f"c{len(self.containers) + 1}"
        self.containers[ref] = label
        return ref

    def add_line(self, container_ref, item_label, quantity):
        if self.fail_add:
            raise RuntimeError("store down")
        self.lines.append((container_ref, item_label, quantity))


@pytest.fixture
def session():
    return StreamingSession()


class TestDrain:
    def test_reference_then_calculation(self, session):
        actions = session.ingest("référence vis M6x20 ok 5 plus 10 ok")

        assert actions == [
            SessionAction(kind="set_reference", item_label="vis M6x20"),
            SessionAction(kind="add_line", item_label="vis M6x20", quantity=15),
        ]
        assert session.buffer == ""
        assert session.active_item_label == "vis M6x20"
        assert session.lines == [ParsedLine(item_label="vis M6x20", quantity=15)]
        assert session.current_subtotal() == 15
        assert session.last_status == "Ajout: 15 × vis M6x20"

    def test_fragments_accumulate(self, session):
        assert session.ingest("référence vis") == []
        assert session.buffer == "référence vis"

        actions = session.ingest("M6x20 OK 3")
        assert actions == [SessionAction(kind="set_reference", item_label="vis M6x20")]
        assert session.buffer == "3"

        actions = session.ingest("plus 2 d'accord")
        assert actions == [SessionAction(kind="add_line", item_label="vis M6x20", quantity=5)]
        assert session.buffer == ""

    @pytest.mark.parametrize("marker", ["ok", "OK", "Okay", "okey", "d'accord", "D’accord", "dac"])
    def test_markers(self, session, marker):
        session.ingest(f"ref vis {marker}")
        assert session.active_item_label == "vis"

    def test_marker_must_be_whole_word(self, session):
        session.ingest("référence stock")
        assert session.buffer == "référence stock"
        session.ingest("ok")
        assert session.active_item_label == "stock"

    def test_remainder_stays_buffered(self, session):
        session.ingest("ref vis ok 4 plus")
        assert session.buffer == "4 plus"
        assert session.lines == []

    def test_empty_segment(self, session):
        assert session.ingest("ok ok") == []
        assert session.last_status == "Segment vide ignoré"


class TestReference:
    @pytest.mark.parametrize("prefix", ["référence", "Reference", "ref", "ARTICLE"])
    def test_prefixes(self, session, prefix):
        session.ingest(f"{prefix} écrou M8 ok")
        assert session.active_item_label == "écrou M8"
        assert session.last_status == "Référence active: écrou M8"

    def test_empty_reference(self, session):
        assert session.ingest("référence ok") == []
        assert session.active_item_label == ""
        assert "référence vide" in session.last_status.lower()

    def test_reference_clears_draft(self, session):
        session.ingest("ref vis ok (2 plus ok")
        assert session.expression_draft == "(2+"
        session.ingest("ref écrou ok")
        assert session.expression_draft == ""


class TestCalculation:
    def test_requires_active_reference(self, session):
        assert session.ingest("5 plus 10 ok") == []
        assert "aucune référence active" in session.last_status.lower()
        assert session.lines == []

    def test_expression_error(self, session):
        session.ingest("ref vis ok (2 plus 3 ok")
        assert "parenthèse manquante" in session.last_status
        assert session.expression_draft == "(2+3"
        assert session.lines == []

    def test_non_positive_result(self, session):
        actions = session.ingest("ref vis ok 2 moins 5 ok")
        assert [a.kind for a in actions] == ["set_reference"]
        assert session.last_status == "Résultat <= 0 (-3) : rien ajouté."

    def test_spoken_multiplication(self, session):
        session.ingest("ref vis ok 3 x 4 ok 10 fois 2 ok")
        assert [l.quantity for l in session.lines] == [12, 20]
        assert session.current_subtotal("vis") == 32

    def test_operator_precedence(self, session):
        actions = session.ingest("référence vis M6x20 ok 5 plus 10 plus 20 fois 2 moins 12 ok")
        assert actions[-1] == SessionAction(kind="add_line", item_label="vis M6x20", quantity=43)

    def test_division_result(self, session):
        session.ingest("ref câble ok 5 divisé par 2 ok")
        assert session.lines == [ParsedLine(item_label="câble", quantity=2.5)]

    def test_draft_cleared_after_add(self, session):
        session.ingest("ref vis ok 4 ok")
        assert session.expression_draft == ""


class TestContainer:
    def test_open_container(self, session):
        actions = session.ingest("ref vis ok 3 ok contenant carton 12 ok")
        assert actions[-1] == SessionAction(kind="create_container", container_label="carton 12")
        assert session.container_label == "carton 12"
        assert session.active_item_label == ""
        assert session.lines == []
        assert session.last_status == "Contenant créé: carton 12"

    def test_default_label(self, session):
        session.ingest("bac ok")
        assert session.container_label == DEFAULT_CONTAINER_LABEL

    def test_keeps_previous_label(self, session):
        session.ingest("carton A ok carton ok")
        assert session.container_label == "A"


class TestBackend:
    def test_add_requires_container(self):
        backend = FakeBackend()
        session = StreamingSession(backend=backend)

        actions = session.ingest("ref vis ok 4 ok")
        assert [a.kind for a in actions] == ["set_reference"]
        assert "aucun contenant actif" in session.last_status.lower()
        assert backend.lines == []

    def test_forwards_actions(self):
        backend = FakeBackend()
        session = StreamingSession(backend=backend)

        session.ingest("contenant A ok ref vis ok 4 ok")
        assert session.container_ref == "c1"
        assert backend.containers == {"c1": "A"}
        assert backend.lines == [("c1", "vis", 4)]

    def test_bound_container(self):
        backend = FakeBackend()
        session = StreamingSession(backend=backend, container_ref="x9", container_label="B")
        session.ingest("ref vis ok 2 ok")
        assert backend.lines == [("x9", "vis", 2)]

    def test_failed_add_is_not_fatal(self):
        backend = FakeBackend()
        session = StreamingSession(backend=backend, container_ref="c1")
        session.ingest("ref vis ok 4 ok")

        backend.fail_add = True
        actions = session.ingest("2 ok 3")
        assert actions == []
        assert session.last_status == "Erreur ajout: store down"
        assert session.buffer == "3"
        assert session.current_subtotal() == 4

    def test_failed_create_is_not_fatal(self):
        backend = FakeBackend()
        backend.fail_create = True
        session = StreamingSession(backend=backend, container_ref="c0", container_label="old")
        session.ingest("ref vis ok contenant new ok")

        assert session.last_status == "Erreur création contenant: store down"
        assert session.container_ref == "c0"
        assert session.container_label == "old"
        assert session.active_item_label == "vis"
        assert session.buffer == ""


class TestSubtotalAndReset:
    def test_subtotal_keys_normalized(self, session):
        session.ingest("ref Vis M6 ok 3 ok ref vis m6 ok 2 ok")
        assert session.current_subtotal("  VIS M6 ") == 5

    def test_subtotal_without_reference(self, session):
        assert session.current_subtotal() == 0

    def test_seeded_lines(self):
        session = StreamingSession(lines=[ParsedLine(item_label="vis", quantity=2)])
        session.ingest("ref vis ok 3 ok")
        assert session.current_subtotal() == 5

    def test_reset(self, session):
        session.ingest("ref vis ok 3 ok 4 plus")
        session.reset()

        assert session.buffer == ""
        assert session.active_item_label == ""
        assert session.last_status == ""
        assert session.expression_draft == ""
        assert session.current_subtotal("vis") == 3

        session.reset()
        assert session.buffer == ""
