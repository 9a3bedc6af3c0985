# goianinha

The back half of a compiler for Goianinha, a small teaching language with
`int` and `car` types, functions, blocks, `se`/`enquanto` control flow and
`escreva`/`novalinha` output. Given an abstract syntax tree, it checks the
program's meaning and emits MIPS assembly text for simulators such as SPIM
or MARS.

## Installation

```
pip install .
```

Requires Python 3.10 or newer. It has no runtime dependencies.

## Modules

- `goianinha.ast`: the tree.
  - `ASTNode` is a dataclass with the fields `kind` (a `NodeKind`), `line`,
    `value_str`, `value_int`, `data_type` (a `DataType`) and `children`.
    A child may be `None`.
  - `ASTNode.walk()` yields a node and all its descendants in pre-order.
  - `format_ast(root, level)` renders a tree as an indented outline, one
    node per line, for example `- [3] CONST (42, tipo=0)`.
  - `print_ast(root, level, file)` writes that outline to `file`, or to
    standard output when `file` is `None`.
- `goianinha.symbols`: scoped symbol tables.
  - A `SymbolTable` holds `VariableEntry` and `FunctionEntry` records. Each
    variable gets its own frame offset, starting at -12 and then going down
    in steps of 4.
  - Names are cut to 63 characters. A table holds at most 100 variables and
    100 functions, and a signature keeps at most 10 parameter types. Further
    insertions are ignored and return `None`.
  - `ScopeStack` nests up to 100 tables and starts with one global scope.
    `lookup` searches from the innermost scope outwards, and `lookup_local`
    searches the innermost scope only. Functions are always inserted into,
    and looked up in, the global scope.
- `goianinha.semantic`: `SemanticAnalyzer` and the shortcut `analyze(root)`.
  - The analyser rejects:
    - redeclared functions and variables;
    - undeclared names;
    - malformed calls, calls to undeclared functions, and calls with the
      wrong number or types of arguments;
    - invalid assignments, and assignments between different types;
    - `retorne` statements whose type differs from the function's return
      type.
  - Each of these raises `SemanticError`, which has `message` and `line`
    attributes.
  - Along the way it fills in `data_type` on identifier and expression
    nodes.
  - The helpers `collect_parameter_types`, `count_arguments` and
    `extract_parameters` are public.
- `goianinha.codegen`: `MipsGenerator`.
  - `generate_mips(root, scopes)` returns the assembly as a string, and
    `write_mips(root, out, scopes)` writes it to an open text stream.
  - Loads and stores of variables are resolved through the optional
    `ScopeStack`. Without one, or when a name is not found in it, no
    instruction is emitted for that load or store.

## Example

```python
from goianinha.ast import ASTNode, DataType, NodeKind, print_ast
from goianinha.semantic import analyze
from goianinha.codegen import generate_mips

value = ASTNode(NodeKind.CONST, line=3, value_int=42, data_type=DataType.INT)
write = ASTNode(NodeKind.CMD, line=3, value_str="escreva", children=[value])
main_block = ASTNode(NodeKind.BLOCK, line=2, value_str="programa", children=[write])
program = ASTNode(NodeKind.PROGRAM, line=1, children=[main_block])

print_ast(program)
analyze(program)
print(generate_mips(program))
```

The generated text is laid out as follows:

1. A `.data` section holding a newline string `_nl`.
2. One label for each function, with prologue and `<name>_exit` epilogue.
3. A `main:` label for the block whose `value_str` is `"programa"`.
4. The exit system call at the end.

## What the package does not do

There is no lexer, no parser and no command-line program. You build the
syntax tree in Python, or produce it with a front end of your own, and then
pass it to the analyser and the generator. Assembling and running the
generated code is left to a MIPS simulator.

## Running the tests

```
pip install .[test]
pytest
```