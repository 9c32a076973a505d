"""
Property list loading for any on-disk format.

Binary and XML property lists are handled by plistlib; everything else is
treated as the OpenStep dialect and goes through our own parser.
"""

import codecs
import plistlib
from pathlib import Path
from typing import Any, Union
from xml.parsers.expat import ExpatError

from pbxdoctor.parser.lexer import LexerError
from pbxdoctor.parser.parser import ParseError, parse_source


XML_HEADERS = (b'<?xml', b'<plist')

# Checked longest first; the UTF-32 LE mark begins with the UTF-16 LE one
XML_BOMS = (
    (codecs.BOM_UTF32_BE, 'utf-32-be'),
    (codecs.BOM_UTF32_LE, 'utf-32-le'),
    (codecs.BOM_UTF8, 'utf-8'),
    (codecs.BOM_UTF16_BE, 'utf-16-be'),
    (codecs.BOM_UTF16_LE, 'utf-16-le'),
)


class PropertyListError(Exception):
    """A property list could not be read as a value tree."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


def _looks_like_xml(data: bytes) -> bool:
    if data.lstrip().startswith(b'<'):
        return True
    for bom, encoding in XML_BOMS:
        if not data.startswith(bom):
            continue
        for header in XML_HEADERS:
            prefix = bom + header.decode('ascii').encode(encoding)
            if data.startswith(prefix):
                return True
        # a UTF-8 BOM may still be followed by whitespace before the markup
        if bom == codecs.BOM_UTF8 and data[len(bom):].lstrip().startswith(b'<'):
            return True
    return False


def load_property_list(data: bytes) -> Any:
    """
    Deserialize property list bytes into a value tree.

    Raises:
        PropertyListError: with a human-readable reason on any failure
    """
    if not data.replace(codecs.BOM_UTF8, b'', 1).strip():
        raise PropertyListError("empty property list")

    if data.startswith(b'bplist') or _looks_like_xml(data):
        try:
            return plistlib.loads(data)
        except ExpatError as e:
            raise PropertyListError(f"malformed XML: {e}") from e
        except plistlib.InvalidFileException as e:
            raise PropertyListError(str(e) or "invalid property list") from e
        except (ValueError, TypeError, KeyError, IndexError) as e:
            # plistlib surfaces structural problems (unbalanced tags,
            # missing values for keys) as generic errors
            raise PropertyListError(f"invalid property list structure: {e}") from e

    try:
        source = data.decode('utf-8-sig')
    except UnicodeDecodeError:
        source = data.decode('latin-1')

    try:
        return parse_source(source)
    except (LexerError, ParseError) as e:
        raise PropertyListError(str(e)) from e


def load_property_list_file(path: Union[str, Path]) -> Any:
    """
    Read and deserialize a property list file.

    Raises:
        OSError: if the file cannot be read
        PropertyListError: if the contents are not a valid property list
    """
    with open(path, 'rb') as f:
        data = f.read()
    return load_property_list(data)
