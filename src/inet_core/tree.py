"""Textual tree syntax for interaction nets.

One line holds one tree::

    *            eraser
    (a b)        constructor, label 0
    [a b]        constructor, label 1
    {7 a b}      constructor, label 7
    x            variable occurrence
    @main        reference
    #12          number
    t ~ u        redex

Only erasers, constructors and variables can be attached to a net; the other
forms parse and render so they can be reported precisely by the net builder.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Tuple, Union

from inet_core.errors import ParseError

LABEL_MAX = 0xFFFF

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<punct>[()\[\]{}*~])
    | (?P<ref>@[A-Za-z_][A-Za-z0-9_.']*)
    | (?P<num>\#-?[0-9]+)
    | (?P<int>[0-9]+)
    | (?P<name>[A-Za-z_][A-Za-z0-9_.']*)
    """,
    re.VERBOSE,
)
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.']*\Z")

_CLOSE = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class Era:
    pass


@dataclass(frozen=True)
class Ctr:
    lab: int
    lft: "Tree"
    rgt: "Tree"


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Ref:
    name: str


@dataclass(frozen=True)
class Num:
    value: int


@dataclass(frozen=True)
class Redex:
    lft: "Tree"
    rgt: "Tree"


Tree = Union[Era, Ctr, Var, Ref, Num, Redex]

# (kind, text, column)
Token = Tuple[str, str, int]


def tokenize(line: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(line):
        m = _TOKEN_RE.match(line, pos)
        if m is None:
            raise ParseError(f"unexpected character {line[pos]!r}", column=pos + 1)
        kind = m.lastgroup
        if kind != "ws":
            tokens.append((kind, m.group(), pos + 1))
        pos = m.end()
    return tokens


def _pop_token(tokens: Deque[Token]) -> Token:
    if not tokens:
        raise ParseError("unexpected end of input")
    return tokens.popleft()


def _expect_token(tokens: Deque[Token], expected: str) -> Token:
    token = _pop_token(tokens)
    if token[1] != expected:
        raise ParseError(f"expected {expected!r}, got {token[1]!r}", column=token[2])
    return token


def _label(text: str, column: int) -> int:
    lab = int(text)
    if lab > LABEL_MAX:
        raise ParseError(f"label {lab} exceeds {LABEL_MAX}", column=column)
    return lab


def _open_label(tokens: Deque[Token], opener: str) -> int:
    if opener == "(":
        return 0
    if opener == "[":
        return 1
    lab_kind, lab_text, lab_column = _pop_token(tokens)
    if lab_kind != "int":
        raise ParseError(f"expected label, got {lab_text!r}", column=lab_column)
    return _label(lab_text, lab_column)


def _parse_leaf(kind: str, text: str, column: int) -> Tree:
    if kind == "punct" and text == "*":
        return Era()
    if kind == "name":
        return Var(text)
    if kind == "ref":
        return Ref(text[1:])
    if kind == "num":
        return Num(int(text[1:]))
    raise ParseError(f"unexpected {text!r}", column=column)


def _parse_tree(tokens: Deque[Token]) -> Tree:
    # (label, opener, children) for every constructor still missing a child.
    open_ctrs: List[Tuple[int, str, List[Tree]]] = []
    while True:
        kind, text, column = _pop_token(tokens)
        if kind == "punct" and text in _CLOSE:
            open_ctrs.append((_open_label(tokens, text), text, []))
            continue
        tree = _parse_leaf(kind, text, column)
        while open_ctrs:
            lab, opener, children = open_ctrs[-1]
            children.append(tree)
            if len(children) < 2:
                break
            open_ctrs.pop()
            _expect_token(tokens, _CLOSE[opener])
            tree = Ctr(lab, children[0], children[1])
        if not open_ctrs:
            return tree


def parse(line: str) -> Tree:
    """Parse one line into a tree; raises ParseError."""
    tokens = deque(tokenize(line))
    tree = _parse_tree(tokens)
    if tokens and tokens[0][1] == "~":
        tokens.popleft()
        tree = Redex(tree, _parse_tree(tokens))
    if tokens:
        _, text, column = tokens[0]
        raise ParseError(f"trailing input {text!r}", column=column)
    return tree


def _brackets(lab: int) -> Tuple[str, str]:
    if lab == 0:
        return "(", ")"
    if lab == 1:
        return "[", "]"
    return f"{{{lab} ", "}"


def render(tree: Tree) -> str:
    out: List[str] = []
    # Pending trees and literal text, rightmost first.
    todo: list = [tree]
    while todo:
        item = todo.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Era):
            out.append("*")
        elif isinstance(item, Ctr):
            opener, closer = _brackets(item.lab)
            todo.extend((closer, item.rgt, " ", item.lft, opener))
        elif isinstance(item, Var):
            if not _NAME_RE.match(item.name):
                raise ValueError(f"invalid variable name {item.name!r}")
            out.append(item.name)
        elif isinstance(item, Ref):
            out.append(f"@{item.name}")
        elif isinstance(item, Num):
            out.append(f"#{item.value}")
        elif isinstance(item, Redex):
            todo.extend((item.rgt, " ~ ", item.lft))
        else:
            raise TypeError(f"not a tree: {type(item).__name__}")
    return "".join(out)


def tree_shape(tree) -> str:
    return type(tree).__name__.lower()


__all__ = [
    "LABEL_MAX",
    "Era",
    "Ctr",
    "Var",
    "Ref",
    "Num",
    "Redex",
    "Tree",
    "tokenize",
    "parse",
    "render",
    "tree_shape",
]
