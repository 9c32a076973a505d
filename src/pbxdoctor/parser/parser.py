"""
OpenStep Property List Parser

Converts a token stream from the lexer into a generic value tree:
dicts, lists, strings and bytes. The format has no typed numbers or
booleans, so every scalar stays a string.
"""

from typing import Any, Dict, List, Optional, Union

from pbxdoctor.parser.lexer import Lexer, Token, TokenType


Value = Union[Dict[str, Any], List[Any], str, bytes]


class ParseError(Exception):
    """Error during parsing."""
    def __init__(self, message: str, token: Token = None, line: int = None, column: int = None):
        self.token = token
        self.line = line or (token.line if token else 0)
        self.column = column or (token.column if token else 0)
        self.message = message
        if token:
            super().__init__(f"Parse error at line {token.line}, column {token.column}: {message}")
        elif line:
            super().__init__(f"Parse error at line {line}, column {column or 0}: {message}")
        else:
            super().__init__(f"Parse error: {message}")


class Parser:
    """
    Parser for OpenStep property lists.

    Usage:
        parser = Parser(tokens)
        value = parser.parse()
    """

    SCALARS = (TokenType.STRING, TokenType.IDENTIFIER)

    def __init__(self, tokens: List[Token], filename: str = "<unknown>"):
        self.tokens = tokens
        self.filename = filename
        self.pos = 0
        self.length = len(tokens)

    def _current(self) -> Optional[Token]:
        """Get current token or None if at end."""
        if self.pos >= self.length:
            return None
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Optional[Token]:
        """Peek ahead by offset tokens."""
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.tokens[pos]

    def _advance(self) -> Optional[Token]:
        """Advance one token and return the previous one."""
        token = self._current()
        if token is not None:
            self.pos += 1
        return token

    def _expect(self, token_type: TokenType, message: str = None) -> Token:
        """Expect a specific token type, raise error if not found."""
        token = self._current()
        if token is None or token.type == TokenType.EOF:
            raise ParseError(message or f"Expected {token_type.name}, got end of file", token)
        if token.type != token_type:
            raise ParseError(
                message or f"Expected {token_type.name}, got {token.type.name}",
                token
            )
        return self._advance()

    def _at_end(self) -> bool:
        token = self._current()
        return token is None or token.type == TokenType.EOF

    def parse(self) -> Value:
        """Parse the token stream into a value tree."""
        if self._at_end():
            # An empty strings file is an empty dictionary
            return {}

        first = self._current()
        second = self._peek()
        if first.type in self.SCALARS and second is not None and second.type == TokenType.EQUALS:
            # Strings-file form: top-level key = value; pairs without braces
            value = self._parse_entries(terminator=TokenType.EOF)
        else:
            value = self._parse_value()

        if not self._at_end():
            raise ParseError("Unexpected content after root value", self._current())
        return value

    def _parse_value(self) -> Value:
        """Parse any value."""
        token = self._current()

        if token is None or token.type == TokenType.EOF:
            raise ParseError("Expected value, got end of file", token)

        if token.type == TokenType.LBRACE:
            self._advance()
            value = self._parse_entries(terminator=TokenType.RBRACE)
            self._advance()  # consume }
            return value

        if token.type == TokenType.LPAREN:
            return self._parse_array()

        if token.type == TokenType.DATA:
            self._advance()
            return bytes.fromhex(token.value)

        if token.type in self.SCALARS:
            self._advance()
            return token.value

        raise ParseError(f"Unexpected token {token.type.name}", token)

    def _parse_entries(self, terminator: TokenType) -> Dict[str, Any]:
        """Parse key = value; pairs until the terminator token (not consumed)."""
        result: Dict[str, Any] = {}

        while True:
            token = self._current()
            if token is None or token.type == terminator:
                break
            if token.type == TokenType.EOF:
                raise ParseError("Unterminated dictionary", token)
            if token.type not in self.SCALARS:
                raise ParseError(f"Expected dictionary key, got {token.type.name}", token)

            key = self._advance().value
            self._expect(TokenType.EQUALS, f"Expected '=' after key {key!r}")
            result[key] = self._parse_value()
            self._expect(TokenType.SEMICOLON, f"Expected ';' after value for key {key!r}")

        return result

    def _parse_array(self) -> List[Any]:
        """Parse ( item, item, ... ) allowing a trailing comma."""
        self._expect(TokenType.LPAREN)
        items: List[Any] = []

        while True:
            token = self._current()
            if token is None or token.type == TokenType.EOF:
                raise ParseError("Unterminated array", token)
            if token.type == TokenType.RPAREN:
                self._advance()
                break

            items.append(self._parse_value())

            token = self._current()
            if token is not None and token.type == TokenType.COMMA:
                self._advance()
            elif token is None or token.type != TokenType.RPAREN:
                raise ParseError("Expected ',' or ')' in array", token)

        return items


def parse_source(source: str, filename: str = "<unknown>") -> Value:
    """Parse source text into a value tree."""
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize_all()
    parser = Parser(tokens, filename)
    return parser.parse()


def parse_file(filepath: str) -> Value:
    """Parse a file into a value tree. Handles encoding fallback."""
    # Try UTF-8 with BOM first, then latin-1 (which always succeeds)
    with open(filepath, 'rb') as f:
        raw = f.read()
    for encoding in ['utf-8-sig', 'latin-1']:
        try:
            source = raw.decode(encoding)
            break
        except UnicodeDecodeError:
            continue

    return parse_source(source, str(filepath))
