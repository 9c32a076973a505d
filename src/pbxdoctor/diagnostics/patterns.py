"""
Comment stripping and usage patterns for the unused-resources scan.

Approximate: the patterns are not parsers, they only
remove the most common places an incidental resource name could hide.
"""

import re
from typing import Iterable, List, Pattern

from pbxdoctor.project.model import FileReference


# /* ... */ across lines, shortest match
BLOCK_COMMENTS = re.compile(r"/\*(?:.|\n)*?\*/")

# // to end of line, unless preceded by ':' (so "https://" survives)
LINE_COMMENTS = re.compile(r"(?:[^:]|^)//.*?(?:\n|$)", re.MULTILINE)

# <!-- ... --> in XML, HTML, storyboards and xibs
MARKUP_COMMENTS = re.compile(r"<!--.+?-->", re.DOTALL)

# The UIAppFonts array of an Info.plist lists font files by name, which
# would otherwise count as a usage of every bundled font
APP_FONTS = re.compile(r"<key>UIAppFonts</key>.+?</array>", re.DOTALL)


def strip_matches(text: str, patterns: Iterable[Pattern]) -> str:
    """
    Remove every match of each pattern, in order.

    Each pattern is re-applied until it no longer matches, since removing
    one match can expose another.
    """
    for pattern in patterns:
        while True:
            text, count = pattern.subn("", text)
            if count == 0:
                break
    return text


def stripping_patterns(source: FileReference, is_info_plist: bool) -> List[Pattern]:
    """Comment patterns to strip from a source file before searching it."""
    if source.is_code:
        # block comments first; a block can contain "//"
        return [BLOCK_COMMENTS, LINE_COMMENTS]
    if source.is_markup:
        return [MARKUP_COMMENTS]
    if source.is_property_list and is_info_plist:
        return [APP_FONTS]
    return []


def search_strings(source: FileReference, resource_name: str) -> List[str]:
    """
    Literal strings that count as a usage of `resource_name` in `source`.

    In code, a quoted name, e.g. `UIImage(named: "Icon10")`; or a quoted
    path ending in the name, e.g. `load("res/monster.png")`, where a copy
    phase placed the resource in another directory.
    In property lists, node contents, e.g. `<string>Icon10</string>`.
    Anything else gets both quoted strings and node contents.
    """
    if source.is_code:
        return [f'"{resource_name}"', f'/{resource_name}"']
    if source.is_property_list:
        return [f">{resource_name}<"]
    return [f'"{resource_name}"', f">{resource_name}<"]
