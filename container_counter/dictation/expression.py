"""Arithmetic on dictated quantities ("5 plus 10 plus 20 fois 2").

``normalize_math_speech`` turns the spoken words into symbols and
``evaluate`` runs a small recursive-descent parser over the result:

    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/') factor)*
    factor := '+' factor | '-' factor | '(' expr ')' | integer

Literals are integers; division may produce a float. Every failure is
returned as an ``Evaluation`` carrying a French error message.
"""

import math
import re

from pydantic import BaseModel, ConfigDict

_SPOKEN_OPERATORS = (
    (re.compile(r"\bplus\b"), "+"),
    (re.compile(r"\bmoins\b"), "-"),
    (re.compile(r"\bfois\b"), "*"),
    (re.compile(r"\bmultiplie\b"), "*"),
    (re.compile(r"\bdivisé\b"), "/"),
    (re.compile(r"\bdivise\b"), "/"),
    (re.compile(r"\bpar\b"), ""),  # "divisé par"
)
_DIGIT_TIMES_RE = re.compile(r"(?<=\d)\s*x\s*(?=\d)")
_NON_EXPRESSION_RE = re.compile(r"[^0-9+\-*/().]")


class ExpressionError(Exception):
    pass


class Evaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int | float | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_math_speech(text: str) -> str:
    t = (text or "").lower()
    for pattern, symbol in _SPOKEN_OPERATORS:
        t = pattern.sub(symbol, t)
    t = _DIGIT_TIMES_RE.sub("*", t)
    # Drops whitespace too
    return _NON_EXPRESSION_RE.sub("", t)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_spaces(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def number(self) -> int:
        self.skip_spaces()
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in "0123456789":
            self.pos += 1
        if start == self.pos:
            raise ExpressionError("nombre attendu")
        return int(self.text[start:self.pos])

    def factor(self) -> int | float:
        self.skip_spaces()
        c = self.peek()
        if c == "+":
            self.pos += 1
            return self.factor()
        if c == "-":
            self.pos += 1
            return -self.factor()
        if c == "(":
            self.pos += 1
            value = self.expr()
            self.skip_spaces()
            if self.peek() != ")":
                raise ExpressionError("parenthèse manquante")
            self.pos += 1
            return value
        return self.number()

    def term(self) -> int | float:
        value = self.factor()
        while True:
            self.skip_spaces()
            c = self.peek()
            if c not in ("*", "/"):
                return value
            self.pos += 1
            rhs = self.factor()
            value = value * rhs if c == "*" else value / rhs

    def expr(self) -> int | float:
        value = self.term()
        while True:
            self.skip_spaces()
            c = self.peek()
            if c not in ("+", "-"):
                return value
            self.pos += 1
            rhs = self.term()
            value = value + rhs if c == "+" else value - rhs


def evaluate(expr: str) -> Evaluation:
    text = (expr or "").strip()
    if not text:
        return Evaluation(error="expression vide")

    parser = _Parser(text)
    try:
        value = parser.expr()
        parser.skip_spaces()
        if parser.pos < len(text):
            return Evaluation(error=f"caractère inattendu: {text[parser.pos]}")
        if not math.isfinite(value):
            return Evaluation(error="résultat invalide")
    except ExpressionError as e:
        return Evaluation(error=str(e))
    except (ZeroDivisionError, OverflowError, ValueError):
        # ValueError: literal longer than the int conversion limit
        return Evaluation(error="résultat invalide")
    except RecursionError:
        return Evaluation(error="expression trop complexe")

    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return Evaluation(value=value)
