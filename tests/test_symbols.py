import pytest

from goianinha.ast import DataType
from goianinha.symbols import (
    MAX_NAME,
    MAX_PARAMS,
    MAX_STACK,
    MAX_VARS,
    ScopeStack,
    SymbolTable,
)


def test_first_variable_offset():
    table = SymbolTable()
    entry = table.insert_variable("a", DataType.INT, False)
    assert entry.position == -12
    assert table.current_offset == entry.position


def test_offsets_decrease_by_slot():
    table = SymbolTable()
    entries = [table.insert_variable(n, DataType.INT, False) for n in "abcde"]
    positions = [e.position for e in entries]
    assert all(a - b == 4 for a, b in zip(positions, positions[1:]))


def test_find_variable_returns_first_match():
    table = SymbolTable()
    first = table.insert_variable("x", DataType.INT, False)
    table.insert_variable("x", DataType.CAR, True)
    assert table.find_variable("x") is first
    assert table.find_variable("missing") is None


def test_variable_table_capacity():
    table = SymbolTable()
    for i in range(MAX_VARS):
        assert table.insert_variable(f"v{i}", DataType.INT, False) is not None
    assert table.insert_variable("extra", DataType.INT, False) is None
    assert len(table.variables) == MAX_VARS
    assert table.find_variable("extra") is None


def test_long_names_are_truncated():
    table = SymbolTable()
    long_name = "n" * (MAX_NAME + 10)
    entry = table.insert_variable(long_name, DataType.INT, False)
    assert len(entry.name) == MAX_NAME - 1
    assert table.find_variable(long_name) is None
    assert table.find_variable(long_name[: MAX_NAME - 1]) is entry


def test_insert_function_records_signature():
    table = SymbolTable()
    types = [DataType.INT, DataType.CAR]
    entry = table.insert_function("f", DataType.INT, types)
    assert entry.param_count == len(types)
    assert entry.param_types == tuple(types)
    assert table.find_function("f") is entry
    assert table.find_function("g") is None


def test_insert_function_keeps_at_most_max_params_types():
    table = SymbolTable()
    types = [DataType.INT] * (MAX_PARAMS + 2)
    entry = table.insert_function("f", DataType.VOID, types)
    assert len(entry.param_types) == MAX_PARAMS
    assert entry.param_count == len(types)


def test_stack_starts_with_global_scope():
    stack = ScopeStack()
    assert len(stack) == 1
    assert stack.current() is not None


def test_lookup_searches_outwards_and_shadows():
    stack = ScopeStack()
    outer = stack.insert_variable("x", DataType.INT, False)
    stack.push_scope()
    assert stack.lookup("x") is outer
    assert stack.lookup_local("x") is None
    inner = stack.insert_variable("x", DataType.CAR, True)
    assert stack.lookup("x") is inner
    assert stack.lookup_local("x") is inner
    stack.pop_scope()
    assert stack.lookup("x") is outer


def test_functions_live_in_global_scope():
    stack = ScopeStack()
    stack.push_scope()
    stack.push_scope()
    entry = stack.insert_function("f", DataType.INT, [DataType.INT])
    assert stack.current().find_function("f") is None
    assert stack.lookup_function("f") is entry
    stack.pop_scope()
    stack.pop_scope()
    assert stack.current().find_function("f") is entry


def test_new_scope_restarts_offsets():
    stack = ScopeStack()
    a = stack.insert_variable("a", DataType.INT, False)
    stack.push_scope()
    b = stack.insert_variable("b", DataType.INT, False)
    assert a.position == b.position


def test_clear_empties_stack():
    stack = ScopeStack()
    stack.insert_variable("x", DataType.INT, False)
    stack.insert_function("f", DataType.INT, [])
    stack.push_scope()
    stack.clear()
    assert len(stack) == 0
    assert stack.current() is None
    assert stack.lookup("x") is None
    assert stack.lookup_local("x") is None
    assert stack.lookup_function("f") is None
    assert stack.insert_variable("y", DataType.INT, False) is None
    assert stack.insert_function("g", DataType.INT, []) is None


def test_pop_on_empty_stack_is_harmless():
    stack = ScopeStack()
    stack.pop_scope()
    stack.pop_scope()
    assert len(stack) == 0


def test_stack_depth_is_capped():
    stack = ScopeStack()
    for _ in range(MAX_STACK + 5):
        stack.push_scope()
    assert len(stack) == MAX_STACK


@pytest.mark.parametrize("is_param", [True, False])
def test_is_param_flag_is_kept(is_param):
    stack = ScopeStack()
    entry = stack.insert_variable("p", DataType.INT, is_param)
    assert stack.lookup("p").is_param is is_param
    assert entry.data_type is DataType.INT