import unicodedata
from typing import Iterable, Protocol

from container_counter.dictation.base import SummaryLine


class QuantityLine(Protocol):
    item_label: str
    quantity: int | float


def collation_key(label: str) -> tuple[str, str]:
    """Sort key close to a French locale compare.

    Accents and case only break ties: unaccented before accented, lower case
    before upper case.
    """
    folded = "".join(
        c for c in unicodedata.normalize("NFKD", label) if not unicodedata.combining(c)
    ).casefold()
    return folded, label.swapcase()


def aggregate(lines: Iterable[QuantityLine]) -> list[SummaryLine]:
    """Sum quantities per exact item label, sorted by label."""
    totals: dict[str, int | float] = {}
    for line in lines:
        totals[line.item_label] = totals.get(line.item_label, 0) + line.quantity

    return [
        SummaryLine(item_label=label, total_quantity=totals[label])
        for label in sorted(totals, key=collation_key)
    ]


def subtotal_key(label: str) -> str:
    return label.strip().lower()


def subtotals(lines: Iterable[QuantityLine]) -> dict[str, int | float]:
    """Running totals keyed by trimmed, lower-cased label."""
    totals: dict[str, int | float] = {}
    for line in lines:
        key = subtotal_key(line.item_label)
        totals[key] = totals.get(key, 0) + line.quantity
    return totals
