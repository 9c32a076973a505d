"""
OpenStep Property List Lexer (Tokenizer)

Converts the ASCII property-list dialect used by project.pbxproj files
into a stream of tokens.
Handles: quoted and unquoted strings, hex data, braces, parens, comments.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional


class TokenType(Enum):
    """Types of tokens in an OpenStep property list."""
    STRING = auto()          # "quoted string"
    IDENTIFIER = auto()      # unquoted string: PBXGroup, 1A2B3C
    DATA = auto()            # <0fbd7a2c>
    EQUALS = auto()          # =
    SEMICOLON = auto()       # ;
    COMMA = auto()           # ,
    LBRACE = auto()          # {
    RBRACE = auto()          # }
    LPAREN = auto()          # (
    RPAREN = auto()          # )
    COMMENT = auto()         # /* block */ or // line
    EOF = auto()             # End of file


@dataclass
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.column})"


class LexerError(Exception):
    """Error during lexical analysis."""
    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        self.message = message
        super().__init__(f"Lexer error at line {line}, column {column}: {message}")


class Lexer:
    """
    Tokenizer for OpenStep property lists.

    Usage:
        lexer = Lexer(source_text)
        tokens = lexer.tokenize_all()
    """

    # Characters allowed in unquoted strings besides alphanumerics
    IDENT_SPECIAL = set("_$+/:.-")

    SINGLE_CHAR_TOKENS = {
        '=': TokenType.EQUALS,
        ';': TokenType.SEMICOLON,
        ',': TokenType.COMMA,
        '{': TokenType.LBRACE,
        '}': TokenType.RBRACE,
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
    }

    ESCAPES = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        'a': '\a',
        'b': '\b',
        'f': '\f',
        'v': '\v',
        '"': '"',
        "'": "'",
        '\\': '\\',
    }

    @staticmethod
    def _is_ident_char(ch: str) -> bool:
        """Check if character can appear in an unquoted string."""
        return ch.isalnum() or ch in Lexer.IDENT_SPECIAL

    def __init__(self, source: str, filename: str = "<unknown>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.length = len(source)

    def _current(self) -> Optional[str]:
        """Get current character or None if at end."""
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        """Peek ahead by offset characters."""
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.source[pos]

    def _advance(self) -> Optional[str]:
        """Advance one character and return it."""
        ch = self._current()
        if ch is not None:
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return ch

    def _skip_whitespace(self) -> None:
        """Skip spaces, tabs and newlines."""
        while self._current() is not None and self._current().isspace():
            self._advance()

    def _read_string(self, quote_char: str) -> str:
        """Read a quoted string, handling escapes."""
        start_line = self.line
        start_col = self.column

        # Skip opening quote
        self._advance()

        result = []
        while True:
            ch = self._current()
            if ch is None:
                raise LexerError("Unterminated string", start_line, start_col)
            if ch == quote_char:
                self._advance()
                break
            if ch == '\\':
                self._advance()
                result.append(self._read_escape(start_line, start_col))
            else:
                result.append(ch)
                self._advance()

        return ''.join(result)

    def _read_escape(self, start_line: int, start_col: int) -> str:
        """Read the character(s) following a backslash."""
        esc = self._current()
        if esc is None:
            raise LexerError("Unterminated string", start_line, start_col)

        if esc in self.ESCAPES:
            self._advance()
            return self.ESCAPES[esc]

        if esc in ('U', 'u'):
            # \Uxxxx (up to four hex digits)
            self._advance()
            digits = []
            while len(digits) < 4 and self._current() is not None and self._current() in "0123456789abcdefABCDEF":
                digits.append(self._advance())
            if not digits:
                raise LexerError("Invalid unicode escape", self.line, self.column)
            return chr(int(''.join(digits), 16))

        if esc in "01234567":
            # \NNN octal
            digits = []
            while len(digits) < 3 and self._current() is not None and self._current() in "01234567":
                digits.append(self._advance())
            return chr(int(''.join(digits), 8))

        # Unknown escape, keep the character
        self._advance()
        return esc

    def _read_identifier(self) -> str:
        """Read an unquoted string."""
        result = []
        while True:
            ch = self._current()
            if ch is None or not self._is_ident_char(ch):
                break
            # "//" or "/*" starts a comment even in the middle of a bare word
            if ch == '/' and self._peek() in ('/', '*'):
                break
            result.append(ch)
            self._advance()
        return ''.join(result)

    def _read_data(self) -> str:
        """Read hex data between angle brackets, returning the hex digits."""
        start_line = self.line
        start_col = self.column

        # Skip <
        self._advance()

        digits = []
        while True:
            ch = self._current()
            if ch is None:
                raise LexerError("Unterminated data", start_line, start_col)
            if ch == '>':
                self._advance()
                break
            if ch.isspace():
                self._advance()
                continue
            if ch not in "0123456789abcdefABCDEF":
                raise LexerError(f"Invalid character {ch!r} in data", self.line, self.column)
            digits.append(ch)
            self._advance()

        if len(digits) % 2:
            raise LexerError("Odd number of hex digits in data", start_line, start_col)
        return ''.join(digits)

    def _read_block_comment(self) -> str:
        """Read a /* ... */ comment."""
        start_line = self.line
        start_col = self.column

        # Skip /*
        self._advance()
        self._advance()

        result = []
        while True:
            ch = self._current()
            if ch is None:
                raise LexerError("Unterminated comment", start_line, start_col)
            if ch == '*' and self._peek() == '/':
                self._advance()
                self._advance()
                break
            result.append(ch)
            self._advance()
        return ''.join(result)

    def _read_line_comment(self) -> str:
        """Read a // comment to end of line."""
        self._advance()
        self._advance()

        result = []
        while True:
            ch = self._current()
            if ch is None or ch == '\n':
                break
            result.append(ch)
            self._advance()
        return ''.join(result)

    def tokenize(self, include_comments: bool = False) -> Iterator[Token]:
        """
        Generate tokens from the source.

        Args:
            include_comments: If True, emit COMMENT tokens. Otherwise skip them.
        """
        while True:
            self._skip_whitespace()

            ch = self._current()
            start_line = self.line
            start_col = self.column

            if ch is None:
                yield Token(TokenType.EOF, '', start_line, start_col)
                break

            # Comments
            if ch == '/' and self._peek() == '*':
                comment = self._read_block_comment()
                if include_comments:
                    yield Token(TokenType.COMMENT, comment, start_line, start_col)
                continue

            if ch == '/' and self._peek() == '/':
                comment = self._read_line_comment()
                if include_comments:
                    yield Token(TokenType.COMMENT, comment, start_line, start_col)
                continue

            if ch in ('"', "'"):
                value = self._read_string(ch)
                yield Token(TokenType.STRING, value, start_line, start_col)
                continue

            if ch == '<':
                value = self._read_data()
                yield Token(TokenType.DATA, value, start_line, start_col)
                continue

            if ch in self.SINGLE_CHAR_TOKENS:
                self._advance()
                yield Token(self.SINGLE_CHAR_TOKENS[ch], ch, start_line, start_col)
                continue

            if self._is_ident_char(ch):
                value = self._read_identifier()
                yield Token(TokenType.IDENTIFIER, value, start_line, start_col)
                continue

            raise LexerError(f"Unexpected character {ch!r}", start_line, start_col)

    def tokenize_all(self, include_comments: bool = False) -> List[Token]:
        """Tokenize the entire source and return a list of tokens."""
        return list(self.tokenize(include_comments=include_comments))


def tokenize_file(filepath: str, include_comments: bool = False) -> List[Token]:
    """Tokenize a file and return a list of tokens."""
    with open(filepath, 'r', encoding='utf-8-sig') as f:
        source = f.read()
    lexer = Lexer(source, filepath)
    return lexer.tokenize_all(include_comments=include_comments)
