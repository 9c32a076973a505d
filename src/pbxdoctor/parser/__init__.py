"""
pbxdoctor.parser - OpenStep Property List Parser

Lexer and parser for the ASCII property-list dialect of project.pbxproj.
Converts source text into a generic value tree (dict / list / str / bytes).
"""

from pbxdoctor.parser.lexer import Lexer, Token, TokenType, LexerError, tokenize_file
from pbxdoctor.parser.parser import (
    Parser,
    ParseError,
    Value,
    parse_file,
    parse_source,
)
from pbxdoctor.parser.plist import (
    PropertyListError,
    load_property_list,
    load_property_list_file,
)

__all__ = [
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "LexerError",
    "tokenize_file",
    # Parser
    "Parser",
    "ParseError",
    "Value",
    "parse_file",
    "parse_source",
    # Generic plist loading
    "PropertyListError",
    "load_property_list",
    "load_property_list_file",
]
