"""
Lox Type Definitions for Python
Implements the Token and AST (expression and statement) domains

This module provides dataclasses for tokens and syntax tree nodes. Tokens
are frozen and compared by value. AST nodes are compared and hashed by
identity so that every node can key the resolver's side-table.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import (
    Any,
    List,
    Optional,
    TypeAlias,
    Union,
)


#==============================================================================
# Token Domain
#==============================================================================

class TokenType(Enum):
    """Lexeme categories produced by the scanner"""

    # Single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()
    COLON = auto()
    QUESTION = auto()

    # One or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    BREAK = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    """A single lexeme with its category, literal value and source line"""
    type: TokenType
    lexeme: str
    literal: Any
    line: int

    def __str__(self) -> str:
        return f"{self.type.name} {self.lexeme} {self.literal!r}"


#==============================================================================
# Expression AST
#==============================================================================

@dataclass(frozen=True, eq=False)
class Assign:
    """Assignment to a variable"""
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary:
    """Binary arithmetic, comparison or equality operator"""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call:
    """Function, method or class call"""
    callee: Expr
    paren: Token
    arguments: List[Expr]


@dataclass(frozen=True, eq=False)
class Get:
    """Property access"""
    object: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Grouping:
    """Parenthesized expression"""
    expression: Expr


@dataclass(frozen=True, eq=False)
class Lambda:
    """Anonymous function expression"""
    keyword: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(frozen=True, eq=False)
class Literal:
    """Literal nil, boolean, number or string"""
    value: Any


@dataclass(frozen=True, eq=False)
class Logical:
    """Short-circuiting 'and' / 'or'"""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Set:
    """Property assignment"""
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Super:
    """'super.method' reference"""
    keyword: Token
    method: Token


@dataclass(frozen=True, eq=False)
class Ternary:
    """Conditional expression: condition ? then_branch : else_branch"""
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True, eq=False)
class This:
    """'this' reference"""
    keyword: Token


@dataclass(frozen=True, eq=False)
class Unary:
    """Prefix '!' or '-'"""
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable:
    """Variable reference"""
    name: Token


# Expr union for all expression nodes
Expr: TypeAlias = Union[
    Assign,
    Binary,
    Call,
    Get,
    Grouping,
    Lambda,
    Literal,
    Logical,
    Set,
    Super,
    Ternary,
    This,
    Unary,
    Variable,
]


#==============================================================================
# Statement AST
#==============================================================================

@dataclass(frozen=True, eq=False)
class Block:
    """Braced statement list with its own scope"""
    statements: List[Stmt]


@dataclass(frozen=True, eq=False)
class Break:
    """'break' out of the innermost loop"""
    keyword: Token


@dataclass(frozen=True, eq=False)
class Class:
    """Class declaration"""
    name: Token
    superclass: Optional[Variable]
    methods: List[Function]


@dataclass(frozen=True, eq=False)
class Expression:
    """Expression evaluated for its side effects"""
    expression: Expr


@dataclass(frozen=True, eq=False)
class Function:
    """Named function or method declaration"""
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(frozen=True, eq=False)
class If:
    """Conditional statement"""
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True, eq=False)
class Print:
    """'print' statement"""
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return:
    """'return' statement; value is None for a bare return"""
    keyword: Token
    value: Optional[Expr]


@dataclass(frozen=True, eq=False)
class Var:
    """Variable declaration"""
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True, eq=False)
class While:
    """'while' loop (also the target of 'for' desugaring)"""
    condition: Expr
    body: Stmt


# Stmt union for all statement nodes
Stmt: TypeAlias = Union[
    Block,
    Break,
    Class,
    Expression,
    Function,
    If,
    Print,
    Return,
    Var,
    While,
]


# Nodes whose variable lookups the resolver records a distance for
ResolvableExpr: TypeAlias = Union[Assign, Super, This, Variable]
