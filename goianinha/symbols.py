"""Scoped symbol tables for variables and functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from goianinha.ast import DataType

MAX_NAME = 64
MAX_VARS = 100
MAX_FUNCS = 100
MAX_STACK = 100
MAX_PARAMS = 10

_FIRST_OFFSET = -8
_SLOT_SIZE = 4


@dataclass
class VariableEntry:
    """A variable or parameter with its frame offset."""

    name: str
    data_type: DataType
    position: int
    is_param: bool = False


@dataclass
class FunctionEntry:
    """A function signature."""

    name: str
    return_type: DataType
    param_count: int
    param_types: tuple[DataType, ...] = ()


@dataclass
class SymbolTable:
    """Symbols declared in a single scope."""

    variables: list[VariableEntry] = field(default_factory=list)
    functions: list[FunctionEntry] = field(default_factory=list)
    current_offset: int = _FIRST_OFFSET

    def insert_variable(
        self, name: str, data_type: DataType, is_param: bool = False
    ) -> Optional[VariableEntry]:
        """Add a variable in the next frame slot; ignored once the table is full."""
        if len(self.variables) >= MAX_VARS:
            return None
        self.current_offset -= _SLOT_SIZE
        entry = VariableEntry(
            name[: MAX_NAME - 1], data_type, self.current_offset, bool(is_param)
        )
        self.variables.append(entry)
        return entry

    def insert_function(
        self, name: str, return_type: DataType, param_types: Iterable[DataType] = ()
    ) -> Optional[FunctionEntry]:
        """Add a function signature; ignored once the table is full."""
        if len(self.functions) >= MAX_FUNCS:
            return None
        types = tuple(param_types)
        entry = FunctionEntry(
            name[: MAX_NAME - 1], return_type, len(types), types[:MAX_PARAMS]
        )
        self.functions.append(entry)
        return entry

    def find_variable(self, name: str) -> Optional[VariableEntry]:
        """Return the first variable with this name, if any."""
        return next((v for v in self.variables if v.name == name), None)

    def find_function(self, name: str) -> Optional[FunctionEntry]:
        """Return the first function with this name, if any."""
        return next((f for f in self.functions if f.name == name), None)


class ScopeStack:
    """A stack of symbol tables; the bottom one is the global scope."""

    def __init__(self) -> None:
        self._tables: list[SymbolTable] = []
        self.push_scope()

    def __len__(self) -> int:
        return len(self._tables)

    def push_scope(self) -> SymbolTable:
        """Open a new innermost scope (silently capped at the stack limit)."""
        table = SymbolTable()
        if len(self._tables) < MAX_STACK:
            self._tables.append(table)
        return table

    def pop_scope(self) -> None:
        """Close the innermost scope, if any."""
        if self._tables:
            self._tables.pop()

    def clear(self) -> None:
        """Close every scope, the global one included."""
        self._tables.clear()

    def current(self) -> Optional[SymbolTable]:
        """Return the innermost scope, or ``None`` when the stack is empty."""
        return self._tables[-1] if self._tables else None

    def insert_variable(
        self, name: str, data_type: DataType, is_param: bool = False
    ) -> Optional[VariableEntry]:
        """Declare a variable in the innermost scope."""
        table = self.current()
        return table.insert_variable(name, data_type, is_param) if table else None

    def insert_function(
        self, name: str, return_type: DataType, param_types: Iterable[DataType] = ()
    ) -> Optional[FunctionEntry]:
        """Declare a function in the global scope."""
        if not self._tables:
            return None
        return self._tables[0].insert_function(name, return_type, param_types)

    def lookup(self, name: str) -> Optional[VariableEntry]:
        """Find a variable, searching from the innermost scope outwards."""
        for table in reversed(self._tables):
            entry = table.find_variable(name)
            if entry is not None:
                return entry
        return None

    def lookup_local(self, name: str) -> Optional[VariableEntry]:
        """Find a variable in the innermost scope only."""
        table = self.current()
        return table.find_variable(name) if table else None

    def lookup_function(self, name: str) -> Optional[FunctionEntry]:
        """Find a function in the global scope."""
        return self._tables[0].find_function(name) if self._tables else None