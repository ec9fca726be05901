"""
Lox Parser
Recursive-descent parser from tokens to statement AST

Syntax errors are recorded as diagnostics. After an error the parser
synchronizes at the next statement boundary and keeps going, so one pass
reports every independent syntax error. Any recorded error makes the parse
a failure even though a partial AST was built.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pylox.errors import Diagnostic, ErrorCodes, location_of
from pylox.types import (
    Assign, Binary, Call, Get, Grouping, Lambda, Literal, Logical, Set,
    Super, Ternary, This, Unary, Variable,
    Block, Break, Class, Expression, Function, If, Print, Return, Var, While,
    Expr, Stmt, Token, TokenType,
)

logger = logging.getLogger(__name__)


MAX_ARGUMENTS = 255

# Keywords that start a statement; synchronization stops in front of them
STATEMENT_KEYWORDS = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})

# Binary operators mapped to the rule parsing their right operand, used to
# recover from a missing left-hand operand
BINARY_OPERATORS = {
    TokenType.BANG_EQUAL: "comparison",
    TokenType.EQUAL_EQUAL: "comparison",
    TokenType.GREATER: "term",
    TokenType.GREATER_EQUAL: "term",
    TokenType.LESS: "term",
    TokenType.LESS_EQUAL: "term",
    TokenType.PLUS: "factor",
    TokenType.SLASH: "unary",
    TokenType.STAR: "unary",
}


class ParseError(Exception):
    """Unwinds the parser to the enclosing declaration for synchronization"""


#==============================================================================
# Parser Class
#==============================================================================

class Parser:
    """Single-use parser over a scanned token list ending in EOF"""

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._current = 0
        self._loop_depth = 0
        self.errors: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def parse(self) -> List[Stmt]:
        """
        Parse a whole program.

        Returns:
            Top-level statements; check `errors` before executing them
        """
        statements: List[Stmt] = []
        while not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        logger.debug(f"Parsed {len(statements)} statements with {len(self.errors)} errors")
        return statements

    #---------------------------------------------------------------------------
    # Declarations
    #---------------------------------------------------------------------------

    def _declaration(self) -> Optional[Stmt]:
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._check(TokenType.FUN) and self._check_next(TokenType.IDENTIFIER):
                self._advance()
                return self._function("function")
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _class_declaration(self) -> Stmt:
        name = self._consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self._match(TokenType.LESS):
            self._consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = Variable(self._previous())

        self._consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods: List[Function] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            methods.append(self._function("method"))
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return Class(name, superclass, methods)

    def _function(self, kind: str) -> Function:
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params, body = self._function_body(kind)
        return Function(name, params, body)

    def _function_body(self, kind: str) -> tuple[List[Token], List[Stmt]]:
        """Parse parameters and braced body; the '(' is already consumed"""
        params: List[Token] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self._consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")

        # 'break' never crosses a function boundary
        enclosing_loop_depth = self._loop_depth
        self._loop_depth = 0
        try:
            body = self._block()
        finally:
            self._loop_depth = enclosing_loop_depth
        return params, body

    def _var_declaration(self) -> Stmt:
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    #---------------------------------------------------------------------------
    # Statements
    #---------------------------------------------------------------------------

    def _statement(self) -> Stmt:
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.BREAK):
            return self._break_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(self._block())
        return self._expression_statement()

    def _for_statement(self) -> Stmt:
        """Desugar 'for' into a block holding the initializer and a while loop"""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[Stmt]
        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition: Optional[Expr] = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._loop_body()

        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])

        return body

    def _if_statement(self) -> Stmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()

        return If(condition, then_branch, else_branch)

    def _print_statement(self) -> Stmt:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def _return_statement(self) -> Stmt:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def _while_statement(self) -> Stmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return While(condition, self._loop_body())

    def _loop_body(self) -> Stmt:
        self._loop_depth += 1
        try:
            return self._statement()
        finally:
            self._loop_depth -= 1

    def _break_statement(self) -> Stmt:
        keyword = self._previous()
        if self._loop_depth == 0:
            self._error(keyword, "Can't use 'break' outside of a loop.")
        self._consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
        return Break(keyword)

    def _block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> Stmt:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    #---------------------------------------------------------------------------
    # Expressions (lowest to highest precedence)
    #---------------------------------------------------------------------------

    def _expression(self) -> Expr:
        return self._assignment()

    def _assignment(self) -> Expr:
        expr = self._ternary()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)

            # Reported without unwinding; the parser is not confused
            self._error(equals, "Invalid assignment target.")

        return expr

    def _ternary(self) -> Expr:
        expr = self._or()

        if self._match(TokenType.QUESTION):
            then_branch = self._ternary()
            self._consume(TokenType.COLON, "Expect ':' after then branch of conditional expression.")
            else_branch = self._ternary()
            expr = Ternary(expr, then_branch, else_branch)

        return expr

    def _or(self) -> Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            expr = Logical(expr, operator, self._and())
        return expr

    def _and(self) -> Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            expr = Logical(expr, operator, self._equality())
        return expr

    def _equality(self) -> Expr:
        expr = self._comparison()
        while self._match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self._previous()
            expr = Binary(expr, operator, self._comparison())
        return expr

    def _comparison(self) -> Expr:
        expr = self._term()
        while self._match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                          TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self._previous()
            expr = Binary(expr, operator, self._term())
        return expr

    def _term(self) -> Expr:
        expr = self._factor()
        while self._match(TokenType.MINUS, TokenType.PLUS):
            operator = self._previous()
            expr = Binary(expr, operator, self._factor())
        return expr

    def _factor(self) -> Expr:
        expr = self._unary()
        while self._match(TokenType.SLASH, TokenType.STAR):
            operator = self._previous()
            expr = Binary(expr, operator, self._unary())
        return expr

    def _unary(self) -> Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return Unary(operator, self._unary())
        return self._call()

    def _call(self) -> Expr:
        expr = self._primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break

        return expr

    def _finish_call(self, callee: Expr) -> Expr:
        arguments: List[Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE, TokenType.TRUE, TokenType.NIL,
                       TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)

        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self._consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return Super(keyword, method)

        if self._match(TokenType.THIS):
            return This(self._previous())

        if self._match(TokenType.IDENTIFIER):
            return Variable(self._previous())

        if self._match(TokenType.FUN):
            keyword = self._previous()
            self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'fun'.")
            params, body = self._function_body("function")
            return Lambda(keyword, params, body)

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        if self._peek().type in BINARY_OPERATORS:
            operator = self._advance()
            # Parse and discard the right operand before reporting
            getattr(self, f"_{BINARY_OPERATORS[operator.type]}")()
            raise self._error(operator, "Expect left-hand operand before binary operator.")

        raise self._error(self._peek(), "Expect expression.")

    #---------------------------------------------------------------------------
    # Token Helpers
    #---------------------------------------------------------------------------

    def _match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _check(self, token_type: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type == token_type

    def _check_next(self, token_type: TokenType) -> bool:
        if self._current + 1 >= len(self._tokens):
            return False
        return self._tokens[self._current + 1].type == token_type

    def _advance(self) -> Token:
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self._tokens[self._current]

    def _previous(self) -> Token:
        return self._tokens[self._current - 1]

    def _error(self, token: Token, message: str) -> ParseError:
        """Record a diagnostic and return an exception the caller may raise"""
        self.errors.append(Diagnostic(ErrorCodes.PARSE_ERROR, token.line, message, location_of(token)))
        return ParseError(message)

    def _synchronize(self) -> None:
        self._advance()

        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._peek().type in STATEMENT_KEYWORDS:
                return
            self._advance()


def parse(tokens: List[Token]) -> tuple[List[Stmt], List[Diagnostic]]:
    """
    Convenience function to parse a token list.

    Args:
        tokens: Scanner output, terminated by EOF

    Returns:
        Tuple of (statements, parse errors)
    """
    parser = Parser(tokens)
    statements = parser.parse()
    return statements, parser.errors
