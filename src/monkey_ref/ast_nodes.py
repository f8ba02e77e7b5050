"""AST node model shared by the parser and the evaluator.

Two node families, Statement and Expression, both rooted at Node. Every node
keeps the token that started it (excluded from equality so re-parsed trees
compare equal regardless of source positions) and supports:

- token_literal(): literal text of that token
- to_source_text(): canonical re-render, fully parenthesized
- to_tree(): structural dump as a lark Tree, for debugging and tests
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from lark import Token, Tree
from typing_extensions import TypeAlias

from .token_types import TT, Tok

def _no_tok() -> Tok:
    return Tok(TT.ILLEGAL, '')

class Node:
    token: Tok

    def token_literal(self) -> str:
        return self.token.value

    def to_source_text(self) -> str:
        raise NotImplementedError

    def to_tree(self) -> Tree:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_source_text()

class Statement(Node):
    pass

class Expression(Node):
    pass

def _render(node: Optional[Node]) -> str:
    return node.to_source_text() if node is not None else ""

def _dump(node: Optional[Node]) -> Tree | Token:
    if node is None:
        return Token('MISSING', '')
    return node.to_tree()

# ---------------- Root ----------------

@dataclass
class Program(Node):
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def to_source_text(self) -> str:
        return "".join(s.to_source_text() for s in self.statements)

    def to_tree(self) -> Tree:
        return Tree('program', [s.to_tree() for s in self.statements])

# ---------------- Expressions ----------------

@dataclass
class Identifier(Expression):
    value: str
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return self.value

    def to_tree(self) -> Tree:
        return Tree('identifier', [Token('IDENT', self.value)])

@dataclass
class IntegerLiteral(Expression):
    value: int
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return str(self.value)

    def to_tree(self) -> Tree:
        return Tree('integer_literal', [Token('INT', str(self.value))])

@dataclass
class StringLiteral(Expression):
    value: str
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return f'"{self.value}"'

    def to_tree(self) -> Tree:
        return Tree('string_literal', [Token('STRING', self.value)])

@dataclass
class BooleanLiteral(Expression):
    value: bool
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return "true" if self.value else "false"

    def to_tree(self) -> Tree:
        kind = 'TRUE' if self.value else 'FALSE'
        return Tree('boolean_literal', [Token(kind, self.to_source_text())])

@dataclass
class PrefixExpression(Expression):
    operator: str
    right: Optional[Expression]
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return f"({self.operator}{_render(self.right)})"

    def to_tree(self) -> Tree:
        return Tree('prefix', [Token('OP', self.operator), _dump(self.right)])

@dataclass
class InfixExpression(Expression):
    left: Optional[Expression]
    operator: str
    right: Optional[Expression]
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return f"({_render(self.left)} {self.operator} {_render(self.right)})"

    def to_tree(self) -> Tree:
        return Tree('infix', [_dump(self.left), Token('OP', self.operator), _dump(self.right)])

@dataclass
class IfExpression(Expression):
    condition: Optional[Expression]
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        out = f"if ({_render(self.condition)}) {self.consequence.to_source_text()}"
        if self.alternative is not None:
            out += f" else {self.alternative.to_source_text()}"
        return out

    def to_tree(self) -> Tree:
        children: List[Tree | Token] = [_dump(self.condition), self.consequence.to_tree()]
        if self.alternative is not None:
            children.append(self.alternative.to_tree())
        return Tree('if_expr', children)

@dataclass
class FunctionLiteral(Expression):
    parameters: List[Identifier]
    body: BlockStatement
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        params = ", ".join(p.to_source_text() for p in self.parameters)
        return f"fn({params}) {self.body.to_source_text()}"

    def to_tree(self) -> Tree:
        params = Tree('params', [Token('IDENT', p.value) for p in self.parameters])
        return Tree('fn_literal', [params, self.body.to_tree()])

@dataclass
class CallExpression(Expression):
    function: Optional[Expression]
    arguments: List[Optional[Expression]]
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        args = ", ".join(_render(a) for a in self.arguments)
        return f"{_render(self.function)}({args})"

    def to_tree(self) -> Tree:
        args = Tree('args', [_dump(a) for a in self.arguments])
        return Tree('call', [_dump(self.function), args])

# ---------------- Statements ----------------

@dataclass
class LetStatement(Statement):
    name: Identifier
    value: Optional[Expression]
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return f"let {self.name.to_source_text()} = {_render(self.value)};"

    def to_tree(self) -> Tree:
        return Tree('let_stmt', [Token('IDENT', self.name.value), _dump(self.value)])

@dataclass
class ReturnStatement(Statement):
    value: Optional[Expression] = None
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        if self.value is None:
            return "return;"
        return f"return {self.value.to_source_text()};"

    def to_tree(self) -> Tree:
        children = [] if self.value is None else [self.value.to_tree()]
        return Tree('return_stmt', children)

@dataclass
class ExpressionStatement(Statement):
    expression: Optional[Expression]
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        return _render(self.expression)

    def to_tree(self) -> Tree:
        return Tree('expr_stmt', [_dump(self.expression)])

@dataclass
class BlockStatement(Statement):
    statements: List[Statement] = field(default_factory=list)
    token: Tok = field(default_factory=_no_tok, compare=False, repr=False)

    def to_source_text(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(s.to_source_text() for s in self.statements) + " }"

    def to_tree(self) -> Tree:
        return Tree('block', [s.to_tree() for s in self.statements])

AnyNode: TypeAlias = Program | Statement | Expression

STATEMENT_TYPES = (LetStatement, ReturnStatement, ExpressionStatement, BlockStatement)
EXPRESSION_TYPES = (
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
)
