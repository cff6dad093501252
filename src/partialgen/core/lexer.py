"""
Lexer/Tokenizer for projection directives.

Converts the raw text of one directive, e.g.
``"UserForm", derive(eq, frozen), omit(id), optional(email)``,
into a stream of tokens with source location tracking.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import make_syntax_error


class TokenType(Enum):
    """Token types in the directive grammar."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"

    # Clause keywords
    DERIVE = "derive"
    OMIT = "omit"
    OPTIONAL = "optional"

    # Punctuation
    COMMA = ","
    LPAREN = "("
    RPAREN = ")"

    # Special
    EOF = "EOF"


KEYWORDS = {
    "derive",
    "omit",
    "optional",
}

# Clause keywords are ordinary identifiers inside a parenthesized list,
# so `omit(optional)` names a field called "optional".
KEYWORD_AS_IDENTIFIER_TYPES = {
    TokenType.DERIVE,
    TokenType.OMIT,
    TokenType.OPTIONAL,
}


@dataclass
class Token:
    """
    A single token in a directive.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for projection directives.

    Whitespace, including newlines, is insignificant between tokens.
    """

    def __init__(self, text: str):
        """
        Initialize lexer.

        Args:
            text: Directive text to tokenize
        """
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters."""
        while self.current_char() in (" ", "\t", "\r", "\n"):
            self.advance()

    def read_string(self) -> str:
        """Read a quoted string."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()  # " or '
        self.advance()

        chars = []
        while True:
            current = self.current_char()
            if not current or current == quote or current == "\n":
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "\\":
                    chars.append("\\")
                elif escape_char and escape_char == quote:
                    chars.append(quote)
                elif escape_char:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != quote:
            raise make_syntax_error(
                "Unterminated string literal",
                start_line,
                start_col,
                self.text,
            )

        self.advance()
        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire directive text.

        Returns:
            List of tokens terminated by EOF

        Raises:
            DirectiveSyntaxError: If an unexpected character is encountered
        """
        while self.pos < len(self.text):
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column

            if ch in ('"', "'"):
                value = self.read_string()
                self.tokens.append(Token(TokenType.STRING, value, token_line, token_col))

            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                if value in KEYWORDS:
                    token_type = TokenType(value)
                else:
                    token_type = TokenType.IDENTIFIER
                self.tokens.append(Token(token_type, value, token_line, token_col))

            elif ch == ",":
                self.advance()
                self.tokens.append(Token(TokenType.COMMA, ",", token_line, token_col))

            elif ch == "(":
                self.advance()
                self.tokens.append(Token(TokenType.LPAREN, "(", token_line, token_col))

            elif ch == ")":
                self.advance()
                self.tokens.append(Token(TokenType.RPAREN, ")", token_line, token_col))

            else:
                raise make_syntax_error(
                    f"Unexpected character: {ch!r}",
                    token_line,
                    token_col,
                    self.text,
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))

        return self.tokens


def tokenize(text: str) -> list[Token]:
    """
    Convenience function to tokenize directive text.

    Args:
        text: Directive text

    Returns:
        List of tokens
    """
    lexer = Lexer(text)
    return lexer.tokenize()
