"""
Lox Scanner
Turns source text into a list of tokens

Maximal-munch scanning with one-character resynchronization: an error is
recorded and scanning continues, so one pass reports every lexical error.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from pylox.errors import Diagnostic, ErrorCodes
from pylox.types import KEYWORDS, Token, TokenType

logger = logging.getLogger(__name__)


#==============================================================================
# Character Tables
#==============================================================================

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "?": TokenType.QUESTION,
    "*": TokenType.STAR,
}

# char -> (type without '=', type with '=')
EQUAL_SUFFIX_TOKENS: dict[str, tuple[TokenType, TokenType]] = {
    "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

LITERAL_KEYWORDS: dict[TokenType, Any] = {
    TokenType.TRUE: True,
    TokenType.FALSE: False,
    TokenType.NIL: None,
}


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_alpha(c: str) -> bool:
    return c.isalpha() or c == "_"


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or c.isdigit()


#==============================================================================
# Scanner Class
#==============================================================================

class Scanner:
    """
    Single-use scanner over one source string.

    Call scan_tokens() once; the resulting tokens always end with EOF.
    Lexical errors are collected in `errors`.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.errors: List[Diagnostic] = []
        self._start = 0
        self._current = 0
        self._line = 1

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def scan_tokens(self) -> List[Token]:
        """
        Scan the whole source.

        Returns:
            Tokens in source order, terminated by an EOF token
        """
        while not self._is_at_end():
            self._start = self._current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self._line))
        logger.debug(f"Scanned {len(self.tokens)} tokens with {len(self.errors)} errors")
        return self.tokens

    #---------------------------------------------------------------------------
    # Token Dispatch
    #---------------------------------------------------------------------------

    def _scan_token(self) -> None:
        c = self._advance()

        if c in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[c])
        elif c in EQUAL_SUFFIX_TOKENS:
            plain, with_equal = EQUAL_SUFFIX_TOKENS[c]
            self._add_token(with_equal if self._match("=") else plain)
        elif c == "/":
            if self._match("/"):
                self._line_comment()
            elif self._match("*"):
                self._block_comment()
            else:
                self._add_token(TokenType.SLASH)
        elif c in (" ", "\r", "\t"):
            pass
        elif c == "\n":
            self._line += 1
        elif c == '"':
            self._string()
        elif is_digit(c):
            self._number()
        elif is_alpha(c):
            self._identifier()
        else:
            self._error(self._line, "Unexpected character.")

    #---------------------------------------------------------------------------
    # Lexeme Scanners
    #---------------------------------------------------------------------------

    def _line_comment(self) -> None:
        while self._peek() != "\n" and not self._is_at_end():
            self._advance()

    def _block_comment(self) -> None:
        """Skip a /* ... */ comment; nested comments must balance"""
        depth = 1
        while depth > 0 and not self._is_at_end():
            c = self._advance()
            if c == "\n":
                self._line += 1
            elif c == "*" and self._match("/"):
                depth -= 1
            elif c == "/" and self._match("*"):
                depth += 1

    def _string(self) -> None:
        start_line = self._line
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._is_at_end():
            self._error(start_line, "Unterminated string.")
            return

        # The closing quote
        self._advance()
        value = self.source[self._start + 1:self._current - 1]
        self._add_token(TokenType.STRING, value, line=start_line)

    def _number(self) -> None:
        while is_digit(self._peek()):
            self._advance()

        # A '.' is only part of the number when digits follow it
        if self._peek() == "." and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self._start:self._current]))

    def _identifier(self) -> None:
        while is_alphanumeric(self._peek()):
            self._advance()

        text = self.source[self._start:self._current]
        token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)
        self._add_token(token_type, LITERAL_KEYWORDS.get(token_type))

    #---------------------------------------------------------------------------
    # Cursor Helpers
    #---------------------------------------------------------------------------

    def _is_at_end(self) -> bool:
        return self._current >= len(self.source)

    def _advance(self) -> str:
        c = self.source[self._current]
        self._current += 1
        return c

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self._current]

    def _peek_next(self) -> str:
        if self._current + 1 >= len(self.source):
            return "\0"
        return self.source[self._current + 1]

    def _add_token(self, token_type: TokenType, literal: Any = None, line: Optional[int] = None) -> None:
        text = self.source[self._start:self._current]
        self.tokens.append(Token(token_type, text, literal, self._line if line is None else line))

    def _error(self, line: int, message: str) -> None:
        self.errors.append(Diagnostic(ErrorCodes.SCAN_ERROR, line, message))


def scan(source: str) -> tuple[List[Token], List[Diagnostic]]:
    """
    Convenience function to scan a source string.

    Args:
        source: Program text

    Returns:
        Tuple of (tokens, scan errors)
    """
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    return tokens, scanner.errors
