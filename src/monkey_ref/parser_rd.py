"""
Pratt Parser for Monkey

Structure:
- Token source: anything with next_token() (normally lexer_rd.Lexer)
- Parser: two-token lookahead, statement dispatch, Pratt parsing for
  expressions via per-token prefix/infix rule tables
- AST: ast_nodes dataclasses

The parser never raises on malformed input. Problems are recorded as
strings in Parser.errors and parsing resumes at the next statement, so one
pass can report several independent errors. parse_source(strict=True) lifts
them into a ParseError for callers that want an exception.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional

from typing_extensions import Protocol

from .ast_nodes import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .lexer_rd import Lexer
from .token_types import TT, Tok

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class TokenSource(Protocol):
    def next_token(self) -> Tok: ...


class Precedence(IntEnum):
    """Binding power, lowest to highest"""
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < >
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x)


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Optional[Expression]], Optional[Expression]]

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Raised by parse_source(strict=True) when any parse error was recorded"""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. comparison (<, >)
    3. sum (+, -)
    4. product (*, /)
    5. prefix (-x, !x)
    6. call (f(x))
    """

    def __init__(self, lexer: TokenSource):
        self.lexer = lexer
        self.errors: List[str] = []

        self.prefix_parse_fns: Dict[TT, PrefixParseFn] = {}
        self.infix_parse_fns: Dict[TT, InfixParseFn] = {}

        self.register_prefix(TT.IDENT, self.parse_identifier)
        self.register_prefix(TT.INT, self.parse_integer_literal)
        self.register_prefix(TT.STRING, self.parse_string_literal)
        self.register_prefix(TT.TRUE, self.parse_boolean)
        self.register_prefix(TT.FALSE, self.parse_boolean)
        self.register_prefix(TT.BANG, self.parse_prefix_expression)
        self.register_prefix(TT.MINUS, self.parse_prefix_expression)
        self.register_prefix(TT.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TT.IF, self.parse_if_expression)
        self.register_prefix(TT.FUNCTION, self.parse_function_literal)

        for op in (TT.PLUS, TT.MINUS, TT.SLASH, TT.ASTERISK,
                   TT.EQ, TT.NOT_EQ, TT.LT, TT.GT):
            self.register_infix(op, self.parse_infix_expression)
        self.register_infix(TT.LPAREN, self.parse_call_expression)

        # Read two tokens so current and peek are both set
        self.current: Tok = lexer.next_token()
        self.peek: Tok = lexer.next_token()

    def register_prefix(self, token_type: TT, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TT, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> None:
        """Discard current, promote peek, pull one new token"""
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def check(self, token_type: TT) -> bool:
        return self.current.type == token_type

    def check_peek(self, token_type: TT) -> bool:
        return self.peek.type == token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if peek matches, else record an error and stay put"""
        if self.check_peek(token_type):
            self.advance()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    # ========================================================================
    # Errors
    # ========================================================================

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(
            f"expected next token to be {token_type}, got {self.peek.type} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse entire program"""
        program = Program()

        while not self.check(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.advance()

        return program

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        if self.check(TT.LET):
            return self.parse_let_statement()
        if self.check(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        """Parse let statement: let <ident> = <expr>;"""
        let_tok = self.current

        if not self.expect_peek(TT.IDENT):
            return None
        name = Identifier(self.current.value, token=self.current)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)
        stmt = LetStatement(name, value, token=let_tok)

        if isinstance(value, FunctionLiteral):
            if self.check_peek(TT.SEMICOLON):
                self.advance()
            return stmt

        # Anything between the value and the terminating ';' is skipped
        while not self.check(TT.SEMICOLON):
            if self.check_peek(TT.EOF):
                self.peek_error(TT.SEMICOLON)
                return stmt
            self.advance()

        return stmt

    def parse_return_statement(self) -> ReturnStatement:
        """Parse return statement: return [expr][;]"""
        stmt = ReturnStatement(token=self.current)

        if self.check_peek(TT.SEMICOLON) or self.check_peek(TT.RBRACE) or self.check_peek(TT.EOF):
            if self.check_peek(TT.SEMICOLON):
                self.advance()
            return stmt

        self.advance()
        stmt.value = self.parse_expression(Precedence.LOWEST)

        if self.check_peek(TT.SEMICOLON):
            self.advance()
        return stmt

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.current
        stmt = ExpressionStatement(self.parse_expression(Precedence.LOWEST), token=tok)

        if self.check_peek(TT.SEMICOLON):
            self.advance()
        return stmt

    def parse_block_statement(self) -> BlockStatement:
        """Parse { stmts }, current token is the opening brace"""
        block = BlockStatement(token=self.current)
        self.advance()

        while not self.check(TT.RBRACE):
            if self.check(TT.EOF):
                self.errors.append(
                    f"expected next token to be {TT.RBRACE}, got {TT.EOF} instead"
                )
                break
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.advance()

        return block

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """Precedence climbing: one prefix rule, then infix rules while they bind tighter"""
        prefix = self.prefix_parse_fns.get(self.current.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.current.type)
            return None

        left = prefix()

        while not self.check_peek(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek.type)
            if infix is None:
                return left

            self.advance()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.current.value, token=self.current)

    def parse_integer_literal(self) -> Optional[Expression]:
        tok = self.current
        try:
            value = int(tok.value, 10)
        except ValueError:
            value = None

        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f'could not parse "{tok.value}" as integer')
            return None

        return IntegerLiteral(value, token=tok)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.current.value, token=self.current)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.check(TT.TRUE), token=self.current)

    def parse_prefix_expression(self) -> Expression:
        tok = self.current
        self.advance()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(tok.value, right, token=tok)

    def parse_infix_expression(self, left: Optional[Expression]) -> Expression:
        tok = self.current
        # Right operand at the operator's own precedence: left-associative
        precedence = self.current_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        return InfixExpression(left, tok.value, right, token=tok)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None
        return expr

    def parse_if_expression(self) -> Optional[Expression]:
        """Parse if (cond) { ... } [else { ... }]"""
        tok = self.current

        if not self.expect_peek(TT.LPAREN):
            return None
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None
        if not self.expect_peek(TT.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.check_peek(TT.ELSE):
            self.advance()
            if not self.expect_peek(TT.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(condition, consequence, alternative, token=tok)

    def parse_function_literal(self) -> Optional[Expression]:
        """Parse fn(params) { body }"""
        tok = self.current

        if not self.expect_peek(TT.LPAREN):
            return None
        params = self.parse_function_parameters()
        if params is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None
        body = self.parse_block_statement()

        return FunctionLiteral(params, body, token=tok)

    def parse_function_parameters(self) -> Optional[List[Identifier]]:
        params: List[Identifier] = []

        if self.check_peek(TT.RPAREN):
            self.advance()
            return params

        if not self.expect_peek(TT.IDENT):
            return None
        params.append(Identifier(self.current.value, token=self.current))

        while self.check_peek(TT.COMMA):
            self.advance()
            if not self.expect_peek(TT.IDENT):
                return None
            params.append(Identifier(self.current.value, token=self.current))

        if not self.expect_peek(TT.RPAREN):
            return None
        return params

    def parse_call_expression(self, function: Optional[Expression]) -> Optional[Expression]:
        tok = self.current
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(function, arguments, token=tok)

    def parse_call_arguments(self) -> Optional[List[Optional[Expression]]]:
        args: List[Optional[Expression]] = []

        if self.check_peek(TT.RPAREN):
            self.advance()
            return args

        self.advance()
        args.append(self.parse_expression(Precedence.LOWEST))

        while self.check_peek(TT.COMMA):
            self.advance()
            self.advance()
            args.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(TT.RPAREN):
            return None
        return args


def parse_source(source: str, strict: bool = False) -> Program:
    """Parse source text; with strict=True raise ParseError on any recorded error"""
    parser = Parser(Lexer(source))
    program = parser.parse_program()

    if strict and parser.errors:
        raise ParseError(parser.errors)
    return program


def parse_with_errors(source: str) -> tuple[Program, List[str]]:
    """Parse source text and return the program with its error list"""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
