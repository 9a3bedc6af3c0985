"""Semantic analysis: scope checking and type checking of the syntax tree."""

from __future__ import annotations

from itertools import islice
from typing import Iterator, Optional

from goianinha.ast import ASTNode, DataType, NodeKind
from goianinha.symbols import MAX_PARAMS, FunctionEntry, ScopeStack

_COUNTED_KINDS = (NodeKind.ID, NodeKind.CONST, NodeKind.EXPR)


class SemanticError(Exception):
    """A semantic rule of the language was broken."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"{message} (linha {line})")
        self.message = message
        self.line = line


def _parameter_ids(node: Optional[ASTNode]) -> Iterator[ASTNode]:
    if node is None:
        return
    if node.kind is NodeKind.LIST:
        for child in node.children:
            yield from _parameter_ids(child)
    elif node.kind is NodeKind.ID:
        yield node


def collect_parameter_types(params_node: Optional[ASTNode]) -> list[DataType]:
    """Return the declared types of the parameters, at most ``MAX_PARAMS`` of them."""
    return [param.data_type for param in islice(_parameter_ids(params_node), MAX_PARAMS)]


def count_arguments(node: Optional[ASTNode]) -> int:
    """Count the argument expressions held in a (possibly nested) list."""
    if node is None:
        return 0
    if node.kind is NodeKind.LIST:
        return sum(count_arguments(child) for child in node.children)
    return 1 if node.kind in _COUNTED_KINDS else 0


def extract_parameters(func_node: Optional[ASTNode]) -> Optional[ASTNode]:
    """Return the parameter list of a function declaration, if it has one."""
    if func_node is None or not func_node.children:
        return None
    inner = func_node.children[0]
    if inner is None or inner.kind is not NodeKind.FUNCTION or not inner.children:
        return None
    params = inner.children[0]
    if params is not None and params.kind is NodeKind.LIST:
        return params
    return None


class SemanticAnalyzer:
    """Walks a syntax tree, checking declarations and types."""

    def __init__(self) -> None:
        self.scopes = ScopeStack()
        self.current_function: Optional[str] = None
        self.current_return_type = DataType.UNKNOWN

    def analyze(self, root: Optional[ASTNode]) -> None:
        """Check a whole program; raises :class:`SemanticError` on the first fault."""
        self.scopes = ScopeStack()
        self.current_function = None
        self.current_return_type = DataType.UNKNOWN
        try:
            self.visit(root)
        finally:
            self.scopes.clear()

    def visit(self, node: Optional[ASTNode]) -> DataType:
        """Check a node and its subtree, returning the node's type."""
        if node is None:
            return DataType.UNKNOWN
        handler = {
            NodeKind.PROGRAM: self._visit_program,
            NodeKind.BLOCK: self._visit_block,
            NodeKind.DECLVAR: self._visit_declvar,
            NodeKind.FUNCTION: self._visit_function,
            NodeKind.ID: self._visit_id,
            NodeKind.CONST: self._visit_const,
            NodeKind.CMD: self._visit_cmd,
            NodeKind.EXPR: self._visit_expr,
        }.get(node.kind, self._visit_children)
        return handler(node)

    def _visit_children(self, node: ASTNode) -> DataType:
        for child in node.children:
            self.visit(child)
        return DataType.UNKNOWN

    def _visit_program(self, node: ASTNode) -> DataType:
        for child in node.children:
            if child is None:
                continue
            if child.kind is NodeKind.FUNCTION and child.value_str:
                if self.scopes.lookup_function(child.value_str) is not None:
                    raise SemanticError(
                        f"Função '{child.value_str}' redeclarada", child.line
                    )
                params = extract_parameters(child)
                types = collect_parameter_types(params) if params is not None else []
                self.scopes.insert_function(child.value_str, child.data_type, types)
            elif child.kind is NodeKind.DECLVAR:
                self.visit(child)
        for child in node.children:
            if child is not None and child.kind is not NodeKind.DECLVAR:
                self.visit(child)
        return DataType.UNKNOWN

    def _visit_block(self, node: ASTNode) -> DataType:
        self.scopes.push_scope()
        self._visit_children(node)
        self.scopes.pop_scope()
        return DataType.UNKNOWN

    def _declare(self, name: str, data_type: DataType, line: int) -> None:
        if self.scopes.lookup_local(name) is not None:
            raise SemanticError(f"Variável '{name}' já declarada", line)
        self.scopes.insert_variable(name, data_type, False)

    def _declare_ids(self, node: Optional[ASTNode], data_type: DataType) -> None:
        if node is None:
            return
        if node.kind is NodeKind.ID:
            if node.value_str:
                self._declare(node.value_str, data_type, node.line)
                node.data_type = data_type
        elif node.kind is NodeKind.LIST:
            for child in node.children:
                self._declare_ids(child, data_type)

    def _visit_declvar(self, node: ASTNode) -> DataType:
        if node.value_str:
            self._declare(node.value_str, node.data_type, node.line)
        for child in node.children:
            self._declare_ids(child, node.data_type)
        return DataType.UNKNOWN

    def _insert_formal_parameters(self, params: Optional[ASTNode]) -> None:
        if params is None or params.kind is not NodeKind.LIST:
            return
        for param in params.children:
            if param is None:
                continue
            if param.kind is NodeKind.ID and param.value_str:
                self.scopes.insert_variable(param.value_str, param.data_type, True)
            elif param.kind is NodeKind.LIST:
                self._insert_formal_parameters(param)

    def _visit_function(self, node: ASTNode) -> DataType:
        if not node.value_str:
            return self._visit_children(node)
        self.scopes.push_scope()
        self.current_function = node.value_str
        self.current_return_type = node.data_type
        self._insert_formal_parameters(extract_parameters(node))
        self._visit_children(node)
        self.scopes.pop_scope()
        self.current_function = None
        self.current_return_type = DataType.UNKNOWN
        return DataType.UNKNOWN

    def _visit_id(self, node: ASTNode) -> DataType:
        if not node.value_str:
            return DataType.UNKNOWN
        variable = self.scopes.lookup(node.value_str)
        if variable is not None:
            result = variable.data_type
        else:
            function = self.scopes.lookup_function(node.value_str)
            if function is None:
                raise SemanticError(f"'{node.value_str}' não foi declarado", node.line)
            result = function.return_type
        node.data_type = result
        return result

    def _visit_const(self, node: ASTNode) -> DataType:
        return node.data_type

    def _visit_cmd(self, node: ASTNode) -> DataType:
        if not node.value_str:
            return DataType.UNKNOWN
        if node.value_str != "retorne":
            return self._visit_children(node)
        returned = DataType.VOID
        if node.children and node.children[0] is not None:
            returned = self.visit(node.children[0])
        if (
            self.current_return_type is not DataType.UNKNOWN
            and returned != self.current_return_type
        ):
            raise SemanticError(
                f"Retorno incompatível na função '{self.current_function}'", node.line
            )
        return DataType.UNKNOWN

    def _check_arguments(
        self, arg: Optional[ASTNode], function: FunctionEntry, index: int
    ) -> None:
        if arg is None:
            return
        if arg.kind is NodeKind.LIST:
            for child in arg.children:
                self._check_arguments(child, function, index)
                if child is not None and child.kind is not NodeKind.LIST:
                    index += 1
            return
        given = self.visit(arg)
        if index < function.param_count:
            expected = function.param_types[index]
            if given != expected:
                raise SemanticError(
                    f"Incompatibilidade no argumento {index + 1} da chamada da função "
                    f"'{function.name}'. Esperado tipo {int(expected)}, mas foi "
                    f"fornecido tipo {int(given)}",
                    arg.line,
                )

    def _visit_call(self, node: ASTNode) -> DataType:
        callee = node.children[0] if node.children else None
        if callee is None or not callee.value_str:
            raise SemanticError("Chamada de função malformada", node.line)
        function = self.scopes.lookup_function(callee.value_str)
        if function is None:
            raise SemanticError(
                f"Função '{callee.value_str}' não declarada", node.line
            )
        args = node.children[1] if len(node.children) > 1 else None
        given = count_arguments(args)
        if given != function.param_count:
            raise SemanticError(
                f"Função '{function.name}' espera {function.param_count} "
                f"argumento(s), mas recebeu {given}",
                node.line,
            )
        if args is not None:
            self._check_arguments(args, function, 0)
        return function.return_type

    def _visit_assignment(self, node: ASTNode) -> DataType:
        if (
            len(node.children) < 2
            or node.children[0] is None
            or node.children[1] is None
            or node.children[0].kind is not NodeKind.ID
        ):
            raise SemanticError("Atribuição inválida", node.line)
        lhs = self.visit(node.children[0])
        rhs = self.visit(node.children[1])
        if lhs != rhs:
            raise SemanticError("Atribuição com tipos incompatíveis", node.line)
        return lhs

    def _visit_expr(self, node: ASTNode) -> DataType:
        if not node.value_str:
            return DataType.UNKNOWN
        if node.value_str == "call":
            result = self._visit_call(node)
        elif node.value_str == "=":
            result = self._visit_assignment(node)
        else:
            for child in node.children[:2]:
                self.visit(child)
            result = DataType.INT
        node.data_type = result
        return result


def analyze(root: Optional[ASTNode]) -> None:
    """Check a whole program with a fresh analyser."""
    SemanticAnalyzer().analyze(root)