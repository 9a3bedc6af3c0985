"""Abstract syntax tree for Goianinha programs."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Optional, TextIO


class DataType(IntEnum):
    """Data types known to the language and its analysers."""

    INT = 0
    CAR = 1
    VOID = 2
    UNKNOWN = 3
    INVALID = 4


class NodeKind(IntEnum):
    """Kinds of syntax tree nodes."""

    PROGRAM = 0
    FUNCTION = 1
    DECLVAR = 2
    BLOCK = 3
    CMD = 4
    EXPR = 5
    ID = 6
    CONST = 7
    LIST = 8


@dataclass(eq=False)
class ASTNode:
    """A node of the syntax tree; children may contain ``None`` placeholders."""

    kind: NodeKind
    line: int = 0
    value_str: Optional[str] = None
    value_int: int = 0
    data_type: DataType = DataType.UNKNOWN
    children: list[Optional[ASTNode]] = field(default_factory=list)

    def walk(self) -> Iterator[ASTNode]:
        """Yield this node and all its descendants in pre-order."""
        yield self
        for child in self.children:
            if child is not None:
                yield from child.walk()


def _describe(node: ASTNode) -> str:
    text = node.value_str or ""
    kind = node.kind
    if kind is NodeKind.PROGRAM:
        return "PROGRAMA"
    if kind is NodeKind.FUNCTION:
        return f"FUNCAO ({text}, tipo_retorno={int(node.data_type)})"
    if kind is NodeKind.DECLVAR:
        return f"DECLVAR ({text}, tipo={int(node.data_type)})"
    if kind is NodeKind.BLOCK:
        return "BLOCO"
    if kind is NodeKind.CMD:
        return f"COMANDO ({text})"
    if kind is NodeKind.EXPR:
        return f"EXPR ({text}, tipo={int(node.data_type)})"
    if kind is NodeKind.ID:
        return f"ID ({text}, tipo={int(node.data_type)})"
    if kind is NodeKind.CONST:
        return f"CONST ({node.value_int}, tipo={int(node.data_type)})"
    if kind is NodeKind.LIST:
        return "LISTA"
    return f"NODE desconhecido (tipo={int(kind)})"


def _lines(node: Optional[ASTNode], level: int) -> Iterator[str]:
    if node is None:
        return
    yield f"{'  ' * level}- [{node.line}] {_describe(node)}\n"
    for child in node.children:
        yield from _lines(child, level + 1)


def format_ast(root: Optional[ASTNode], level: int = 0) -> str:
    """Render the tree as indented text, one node per line."""
    return "".join(_lines(root, level))


def print_ast(
    root: Optional[ASTNode], level: int = 0, file: Optional[TextIO] = None
) -> None:
    """Write the rendered tree to ``file`` (standard output by default)."""
    print(format_ast(root, level), end="", file=file if file is not None else sys.stdout)