"""
Tests for the pbxdoctor parser module.
"""

import plistlib

import pytest
from pbxdoctor.parser import (
    Lexer,
    LexerError,
    ParseError,
    PropertyListError,
    TokenType,
    load_property_list,
    load_property_list_file,
    parse_file,
    parse_source,
)


class TestLexer:
    """Test tokenization."""

    def test_punctuation(self):
        """Single-character tokens."""
        tokens = Lexer("{ } ( ) = ; ,").tokenize_all()
        types = [t.type for t in tokens]
        assert types == [
            TokenType.LBRACE, TokenType.RBRACE, TokenType.LPAREN, TokenType.RPAREN,
            TokenType.EQUALS, TokenType.SEMICOLON, TokenType.COMMA, TokenType.EOF,
        ]

    def test_unquoted_string(self):
        """Bare words may contain path and build-setting characters."""
        tokens = Lexer("App/Sources/main-view_2.swift").tokenize_all()
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "App/Sources/main-view_2.swift"

    def test_comments_skipped(self):
        """Block and line comments are skipped."""
        tokens = Lexer("// !$*UTF8*$!\nA /* comment */ = B;").tokenize_all()
        assert [t.value for t in tokens[:-1]] == ["A", "=", "B", ";"]

    def test_comments_included(self):
        """Comments can be requested."""
        tokens = Lexer("/* main.swift */").tokenize_all(include_comments=True)
        assert tokens[0].type == TokenType.COMMENT
        assert tokens[0].value == " main.swift "

    def test_string_escapes(self):
        """Escapes inside quoted strings."""
        tokens = Lexer(r'"a\"b\n\\c\101"').tokenize_all()
        assert tokens[0].value == 'a"b\n\\cA'

    def test_unicode_escape(self):
        """\\U escapes take up to four hex digits."""
        tokens = Lexer(r'"\U00e9"').tokenize_all()
        assert tokens[0].value == "é"

    def test_line_numbers(self):
        """Tokens carry line and column."""
        tokens = Lexer("A = B;\n  C = D;").tokenize_all()
        c = tokens[4]
        assert c.value == "C"
        assert (c.line, c.column) == (2, 3)

    def test_unterminated_string(self):
        """Unterminated strings are lexer errors."""
        with pytest.raises(LexerError) as exc:
            Lexer('"abc').tokenize_all()
        assert exc.value.line == 1

    def test_unterminated_comment(self):
        with pytest.raises(LexerError):
            Lexer("/* abc").tokenize_all()

    def test_unexpected_character(self):
        with pytest.raises(LexerError):
            Lexer("A = B!;").tokenize_all()


class TestParser:
    """Test parsing into value trees."""

    def test_empty_source(self):
        """Empty source is an empty dictionary."""
        assert parse_source("") == {}

    def test_dictionary(self):
        """Parse a simple dictionary."""
        assert parse_source("{ a = b; c = \"d e\"; }") == {"a": "b", "c": "d e"}

    def test_nested(self):
        """Nested dictionaries and arrays."""
        source = """
        {
            objects = {
                1A = { isa = PBXGroup; children = ( 1B, 1C, ); };
            };
        }
        """
        value = parse_source(source)
        assert value["objects"]["1A"]["children"] == ["1B", "1C"]

    def test_array_without_trailing_comma(self):
        assert parse_source("(a, b)") == ["a", "b"]

    def test_empty_array(self):
        assert parse_source("()") == []

    def test_numbers_stay_strings(self):
        """The format has no typed numbers."""
        assert parse_source("{ objectVersion = 46; }") == {"objectVersion": "46"}

    def test_data(self):
        """Hex data becomes bytes."""
        assert parse_source("<0fbd 7a>") == b"\x0f\xbd\x7a"

    def test_strings_file(self):
        """Top-level pairs without braces parse as a dictionary."""
        assert parse_source('"hello" = "Hello";\n"bye" = "Bye";') == {"hello": "Hello", "bye": "Bye"}

    def test_missing_semicolon(self):
        """Dictionary entries must end with a semicolon."""
        with pytest.raises(ParseError):
            parse_source("{ a = b }")

    def test_unterminated_dictionary(self):
        with pytest.raises(ParseError):
            parse_source("{ a = b;")

    def test_unterminated_array(self):
        with pytest.raises(ParseError):
            parse_source("( a, b")

    def test_trailing_content(self):
        """Nothing may follow the root value."""
        with pytest.raises(ParseError):
            parse_source("{ a = b; } c")

    def test_parse_file(self, tmp_path):
        """Parse a file with a UTF-8 BOM."""
        path = tmp_path / "project.pbxproj"
        path.write_bytes("\ufeff// !$*UTF8*$!\n{ name = \"Café\"; }".encode("utf-8"))
        assert parse_file(str(path)) == {"name": "Café"}


class TestLoadPropertyList:
    """Test loading property lists of any format."""

    XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>CFBundleName</key>
    <string>App</string>
</dict>
</plist>
"""

    def test_xml(self):
        assert load_property_list(self.XML) == {"CFBundleName": "App"}

    def test_binary(self):
        data = plistlib.dumps({"a": 1}, fmt=plistlib.FMT_BINARY)
        assert load_property_list(data) == {"a": 1}

    def test_openstep(self):
        assert load_property_list(b'{ CFBundleName = App; }') == {"CFBundleName": "App"}

    def test_utf16_xml(self):
        """UTF-16 XML with a byte order mark is read by plistlib."""
        text = self.XML.decode("utf-8").replace('encoding="UTF-8"', 'encoding="UTF-16"')
        assert load_property_list(text.encode("utf-16")) == {"CFBundleName": "App"}

    @pytest.mark.parametrize("data", [b"", b"  \n\t", b"\xef\xbb\xbf"])
    def test_empty(self, data):
        """Empty or blank files are not property lists."""
        with pytest.raises(PropertyListError) as exc:
            load_property_list(data)
        assert exc.value.reason == "empty property list"

    def test_empty_strings_source(self):
        """parse_source still reads an empty strings file as a dictionary."""
        assert parse_source("  \n") == {}

    def test_broken_xml(self):
        """Malformed XML raises with a reason."""
        data = self.XML.replace(b"</string>", b"")
        with pytest.raises(PropertyListError) as exc:
            load_property_list(data)
        assert exc.value.reason

    def test_missing_value(self):
        """A key without a value is not a valid plist."""
        data = b'<?xml version="1.0"?><plist version="1.0"><dict><key>A</key></dict></plist>'
        with pytest.raises(PropertyListError):
            load_property_list(data)

    def test_broken_openstep(self):
        with pytest.raises(PropertyListError) as exc:
            load_property_list(b"{ a = b ")
        assert "line 1" in exc.value.reason

    def test_truncated_binary(self):
        data = plistlib.dumps({"a": 1}, fmt=plistlib.FMT_BINARY)
        with pytest.raises(PropertyListError):
            load_property_list(data[:12])

    def test_unreadable_file(self, tmp_path):
        """Missing files raise OSError, not PropertyListError."""
        with pytest.raises(OSError):
            load_property_list_file(tmp_path / "missing.plist")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
