"""MIPS assembly generation from an analysed syntax tree."""

from __future__ import annotations

from typing import Callable, Optional, TextIO

from goianinha.ast import ASTNode, NodeKind
from goianinha.symbols import ScopeStack, VariableEntry

_BINARY_OPS = {
    "+": "add",
    "-": "sub",
    "*": "mul",
    "/": "div",
    "<": "slt",
    ">": "sgt",
    "==": "seq",
    "!=": "sne",
    "<=": "sle",
    ">=": "sge",
    "e": "and",
    "ou": "or",
}

_HEADER = ".text\n.globl main\n\n"
_DATA = '.data\n_nl: .asciiz "\\n"\n'
_FOOTER = "\n# Fim do programa (syscall 10)\nli $v0, 10\nsyscall\n"


class MipsGenerator:
    """Emits MIPS code for a syntax tree.

    Variables are resolved through ``scopes``; without one, identifiers and
    assignments produce no load or store instructions.
    """

    def __init__(self, scopes: Optional[ScopeStack] = None) -> None:
        self.scopes = scopes
        self._label_count = 0
        self._string_label_count = 0
        self._current_function: Optional[str] = None
        self._out: list[str] = []

    def new_label(self) -> str:
        """Return a fresh control-flow label."""
        label = f"L{self._label_count}"
        self._label_count += 1
        return label

    def new_string_label(self) -> str:
        """Return a fresh label for a string literal."""
        label = f"str{self._string_label_count}"
        self._string_label_count += 1
        return label

    def generate(self, root: Optional[ASTNode]) -> str:
        """Return the whole assembly program for ``root`` (empty for no tree)."""
        if root is None:
            return ""
        self._out = [_HEADER, _DATA, "\n.text\n"]
        self._current_function = None
        self._emit_node(root)
        self._out.append(_FOOTER)
        text = "".join(self._out)
        self._out = []
        return text

    def _emit(self, text: str) -> None:
        self._out.append(text)

    def _lookup(self, name: str) -> Optional[VariableEntry]:
        return self.scopes.lookup(name) if self.scopes is not None else None

    def _emit_children(self, node: ASTNode) -> None:
        for child in node.children:
            if child is not None:
                self._emit_node(child)

    def _emit_node(self, node: Optional[ASTNode]) -> None:
        if node is None:
            return
        handlers: dict[NodeKind, Callable[[ASTNode], None]] = {
            NodeKind.PROGRAM: self._emit_program,
            NodeKind.FUNCTION: self._emit_function,
            NodeKind.DECLVAR: self._emit_declvar,
            NodeKind.BLOCK: self._emit_children,
            NodeKind.CMD: self._emit_cmd,
            NodeKind.EXPR: self._emit_expr,
            NodeKind.CONST: self._emit_const,
            NodeKind.ID: self._emit_id,
        }
        handlers.get(node.kind, self._emit_children)(node)

    def _emit_program(self, node: ASTNode) -> None:
        for child in node.children:
            if child is not None and child.kind in (NodeKind.FUNCTION, NodeKind.DECLVAR):
                self._emit_node(child)
        main_block = next(
            (
                child
                for child in node.children
                if child is not None
                and child.kind is NodeKind.BLOCK
                and child.value_str == "programa"
            ),
            None,
        )
        if main_block is not None:
            self._emit("\nmain:\n")
            self._emit("move $fp, $sp\n")
            self._emit_node(main_block)

    def _emit_function(self, node: ASTNode) -> None:
        name = node.value_str
        if not name:
            self._emit_children(node)
            return
        self._current_function = name
        self._emit(f"\n{name}:\n")
        self._emit("sw $ra, -4($sp)\n")
        self._emit("sw $fp, -8($sp)\n")
        self._emit("move $fp, $sp\n")
        self._emit("addiu $sp, $sp, -8\n")
        self._emit_children(node)
        self._emit(f"{name}_exit:\n")
        self._emit("move $sp, $fp\n")
        self._emit("lw $ra, -4($sp)\n")
        self._emit("lw $fp, -8($sp)\n")
        self._emit("jr $ra\n")
        self._current_function = None

    def _emit_declvar(self, node: ASTNode) -> None:
        self._emit("addiu $sp, $sp, -4 # Aloca espaco para var\n")

    def _first_child(self, node: ASTNode) -> Optional[ASTNode]:
        return node.children[0] if node.children else None

    def _emit_cmd(self, node: ASTNode) -> None:
        command = node.value_str
        if not command:
            return
        first = self._first_child(node)
        if command == "escreva":
            if first is not None:
                self._emit_node(first)
                self._emit("move $a0, $t0\n")
                self._emit("li $v0, 1\n")
                self._emit("syscall\n")
        elif command == "escreva_str":
            if first is not None and first.value_str:
                label = self.new_string_label()
                self._emit(f".data\n{label}: .asciiz {first.value_str}\n.text\n")
                self._emit(f"la $a0, {label}\n")
                self._emit("li $v0, 4\n")
                self._emit("syscall\n")
        elif command == "novalinha":
            self._emit("la $a0, _nl\n")
            self._emit("li $v0, 4\n")
            self._emit("syscall\n")
        elif command == "retorne":
            if self._current_function:
                if first is not None:
                    self._emit_node(first)
                    self._emit("move $v0, $t0\n")
                self._emit(f"j {self._current_function}_exit\n")
        elif command == "se":
            self._emit_if(node)
        elif command == "enquanto":
            self._emit_while(node)
        else:
            self._emit_children(node)

    def _emit_if(self, node: ASTNode) -> None:
        else_label = self.new_label()
        end_label = self.new_label()
        has_else = len(node.children) == 3
        self._emit_node(self._first_child(node))
        self._emit(f"beq $t0, $zero, {else_label if has_else else end_label}\n")
        if len(node.children) > 1:
            self._emit_node(node.children[1])
        if has_else:
            self._emit(f"j {end_label}\n")
            self._emit(f"{else_label}:\n")
            self._emit_node(node.children[2])
        else:
            self._emit(f"{else_label}:\n")
        self._emit(f"{end_label}:\n")

    def _emit_while(self, node: ASTNode) -> None:
        start_label = self.new_label()
        end_label = self.new_label()
        self._emit(f"{start_label}:\n")
        self._emit_node(self._first_child(node))
        self._emit(f"beq $t0, $zero, {end_label}\n")
        if len(node.children) > 1:
            self._emit_node(node.children[1])
        self._emit(f"j {start_label}\n")
        self._emit(f"{end_label}:\n")

    def _emit_expr(self, node: ASTNode) -> None:
        op = node.value_str
        if not op:
            return
        if len(node.children) == 2:
            left, right = node.children
            if left is None or right is None:
                return
            self._emit_node(left)
            self._emit("addiu $sp, $sp, -4\nsw $t0, 0($sp)\n")
            self._emit_node(right)
            self._emit("lw $t1, 0($sp)\naddiu $sp, $sp, 4\n")
            self._emit("move $t2, $t0\n")
            self._emit("move $t0, $t1\n")
            self._emit("move $t1, $t2\n")
            instruction = _BINARY_OPS.get(op)
            if instruction is not None:
                self._emit(f"{instruction} $t0, $t0, $t1\n")
            elif op == "=" and left.value_str:
                variable = self._lookup(left.value_str)
                if variable is not None:
                    self._emit(
                        f"sw $t1, {variable.position}($fp) "
                        f"# Atribuindo valor a {variable.name}\n"
                    )
                    self._emit("move $t0, $t1\n")
        elif len(node.children) == 1:
            operand = node.children[0]
            if operand is None:
                return
            self._emit_node(operand)
            if op == "-":
                self._emit("neg $t0, $t0\n")
            elif op == "!":
                self._emit("seq $t0, $t0, $zero\n")

    def _emit_const(self, node: ASTNode) -> None:
        self._emit(f"li $t0, {node.value_int}\n")

    def _emit_id(self, node: ASTNode) -> None:
        if not node.value_str:
            return
        variable = self._lookup(node.value_str)
        if variable is not None:
            self._emit(
                f"lw $t0, {variable.position}($fp) # Carregando var {variable.name}\n"
            )


def generate_mips(root: Optional[ASTNode], scopes: Optional[ScopeStack] = None) -> str:
    """Return the MIPS program for ``root``."""
    return MipsGenerator(scopes).generate(root)


def write_mips(
    root: Optional[ASTNode], out: TextIO, scopes: Optional[ScopeStack] = None
) -> None:
    """Write the MIPS program for ``root`` to ``out``."""
    out.write(generate_mips(root, scopes))