"""Small builders over sqlglot expressions, shared by every driver.

Drivers compose these instead of formatting SQL strings. The only node that
carries free-form text is `raw`, which renders its payload verbatim.
"""

from __future__ import annotations

from sqlglot import exp


def call(name: str, *args: exp.Expression) -> exp.Expression:
    """Function call by name, e.g. call("TO_DATE", expr) -> TO_DATE(expr)."""
    return exp.Anonymous(this=name, expressions=list(args))


def literal(value: str) -> exp.Literal:
    return exp.Literal.string(value)


def number(value: int | float) -> exp.Literal:
    return exp.Literal.number(value)


def column(name: str) -> exp.Column:
    return exp.column(name)


def raw(text: str) -> exp.Var:
    """Raw SQL fragment, emitted as-is. Callers validate what goes in."""
    return exp.Var(this=text)


def cast(expr: exp.Expression, to: str) -> exp.Cast:
    return exp.Cast(this=expr, to=exp.DataType.build(to))


def extract(part: str, expr: exp.Expression) -> exp.Extract:
    return exp.Extract(this=exp.var(part), expression=expr)


def concat(*parts: exp.Expression) -> exp.Expression:
    """Left-nested `a || b || c`. Arithmetic operands should be wrapped in `paren`."""
    if not parts:
        raise ValueError("concat() needs at least one part")
    result = parts[0]
    for part in parts[1:]:
        result = exp.DPipe(this=result, expression=part)
    return result


def paren(expr: exp.Expression) -> exp.Paren:
    return exp.Paren(this=expr)


def add(left: exp.Expression, right: exp.Expression) -> exp.Add:
    return exp.Add(this=left, expression=right)


def sub(left: exp.Expression, right: exp.Expression) -> exp.Sub:
    return exp.Sub(this=left, expression=right)


def mul(left: exp.Expression, right: exp.Expression) -> exp.Mul:
    return exp.Mul(this=left, expression=right)


def div(left: exp.Expression, right: exp.Expression) -> exp.Div:
    return exp.Div(this=left, expression=right)
