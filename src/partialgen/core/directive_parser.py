"""
Recursive descent parser for projection directives.

Grammar (items are comma separated, in any order, trailing comma allowed)::

    directive   := [item ("," item)* [","]]
    item        := STRING
                 | "derive"   "(" name_list ")"
                 | "omit"     "(" name_list ")"
                 | "optional" "(" name_list ")"
    name_list   := [NAME ("," NAME)* [","]]

Each kind of item may appear at most once.
"""

from __future__ import annotations

import keyword
import logging

from . import ir
from .errors import DirectiveSyntaxError, make_syntax_error
from .lexer import KEYWORD_AS_IDENTIFIER_TYPES, Token, TokenType, tokenize

logger = logging.getLogger(__name__)

CLAUSE_TYPES = {
    TokenType.DERIVE,
    TokenType.OMIT,
    TokenType.OPTIONAL,
}

RawDirective = str | list[Token]


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    Provides token navigation, matching, and positioned error generation.
    """

    def __init__(self, tokens: list[Token], text: str | None = None):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from the lexer, terminated by EOF
            text: Directive text the tokens came from (for error snippets)
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            last = tokens[-1] if tokens else None
            line = last.line if last else 1
            column = last.column + len(last.value) if last else 1
            tokens = [*tokens, Token(TokenType.EOF, "", line, column)]
        self.tokens = tokens
        self.text = text
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check whether the current token is one of the given types."""
        return self.current_token().type in token_types

    def error(self, message: str, token: Token | None = None) -> DirectiveSyntaxError:
        """Build a syntax error positioned at ``token`` (default: current token)."""
        token = token or self.current_token()
        return make_syntax_error(message, token.line, token.column, self.text)

    def expect(self, token_type: TokenType, message: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            DirectiveSyntaxError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            raise self.error(
                message or f"Expected '{token_type.value}', got {describe(token)}",
                token,
            )
        return self.advance()

    def expect_identifier_or_keyword(self, what: str) -> Token:
        """
        Expect an identifier, accepting clause keywords as plain names.

        Args:
            what: What the identifier names, for the error message
        """
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER or token.type in KEYWORD_AS_IDENTIFIER_TYPES:
            return self.advance()
        raise self.error(f"Expected {what}, got {describe(token)}", token)


class DirectiveParser(BaseParser):
    """Parser producing one :class:`ir.Directive` from directive tokens."""

    def parse(self) -> ir.Directive:
        """
        Parse the whole token stream as a single directive.

        Returns:
            Parsed Directive

        Raises:
            DirectiveSyntaxError: On any grammar violation
        """
        start = self.current_token()
        target_name: str | None = None
        target_token: Token | None = None
        clauses: dict[TokenType, tuple[str, ...]] = {}

        while not self.match(TokenType.EOF):
            token = self.current_token()

            if token.type == TokenType.STRING:
                if target_token is not None:
                    raise self.error(
                        f"Duplicate target name {token.value!r}; "
                        f"already named {target_name!r} at {target_token.line}:{target_token.column}",
                        token,
                    )
                target_name = self.parse_target_name()
                target_token = token

            elif token.type in CLAUSE_TYPES:
                if token.type in clauses:
                    raise self.error(f"Duplicate '{token.value}(...)' clause", token)
                clauses[token.type] = self.parse_clause()

            elif token.type == TokenType.IDENTIFIER:
                raise self.error(
                    f"Unknown directive keyword '{token.value}'; "
                    "expected 'derive', 'omit' or 'optional'",
                    token,
                )

            else:
                raise self.error(
                    "Expected a target name string or a derive/omit/optional clause, "
                    f"got {describe(token)}",
                    token,
                )

            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.EOF):
                raise self.error(
                    f"Expected ',' between directive items, got {describe(self.current_token())}"
                )

        return ir.Directive(
            target_name=target_name,
            capabilities=clauses.get(TokenType.DERIVE, ()),
            omit=clauses.get(TokenType.OMIT, ()),
            optional=clauses.get(TokenType.OPTIONAL, ()),
            line=start.line,
            column=start.column,
        )

    def parse_target_name(self) -> str:
        """Parse the target-name string literal."""
        token = self.expect(TokenType.STRING)
        name = token.value
        if not name.isidentifier() or keyword.iskeyword(name):
            raise self.error(f"Target name {name!r} is not a valid identifier", token)
        return name

    def parse_clause(self) -> tuple[str, ...]:
        """
        Parse ``keyword(name, ...)``.

        Returns:
            Names in order of first appearance
        """
        keyword_token = self.advance()
        clause = keyword_token.value
        what = "a capability name" if keyword_token.type == TokenType.DERIVE else "a field name"

        self.expect(TokenType.LPAREN, f"Expected '(' after '{clause}', got {describe(self.current_token())}")

        names: list[str] = []
        while not self.match(TokenType.RPAREN):
            if self.match(TokenType.EOF):
                raise self.error(f"Unclosed '{clause}(' list", keyword_token)

            name_token = self.expect_identifier_or_keyword(f"{what} in {clause}(...)")
            if keyword_token.type == TokenType.DERIVE and keyword.iskeyword(name_token.value):
                raise self.error(
                    f"Capability name {name_token.value!r} is a Python keyword",
                    name_token,
                )
            if name_token.value in names:
                logger.warning(
                    "Ignoring repeated name '%s' in %s(...) at %d:%d",
                    name_token.value,
                    clause,
                    name_token.line,
                    name_token.column,
                )
            else:
                names.append(name_token.value)

            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.RPAREN):
                raise self.error(
                    f"Expected ',' or ')' in {clause}(...), got {describe(self.current_token())}"
                )

        self.expect(TokenType.RPAREN)
        return tuple(names)


def describe(token: Token) -> str:
    """Human-readable token description for error messages."""
    if token.type == TokenType.EOF:
        return "end of directive"
    if token.type == TokenType.STRING:
        return f"string {token.value!r}"
    return f"'{token.value}'"


def parse_directive(raw: RawDirective) -> ir.Directive:
    """
    Parse one directive from its text or its token list.

    Args:
        raw: Directive text, or tokens produced by :func:`tokenize`

    Returns:
        Parsed Directive

    Raises:
        DirectiveSyntaxError: If the directive is malformed
    """
    if isinstance(raw, str):
        return DirectiveParser(tokenize(raw), raw).parse()
    return DirectiveParser(list(raw)).parse()
