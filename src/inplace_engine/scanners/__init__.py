"""Grammar scanners that locate values without re-serialising documents."""

from .base import (
    REGEX_PREFIX,
    Location,
    Scanner,
    stringify_value,
    unquote,
    values_match,
)
from .ini_scanner import IniScanner
from .json_scanner import JsonScanner
from .keyvalue import Entry, KeyValueDialect, KeyValueScanner
from .properties_scanner import PropertiesScanner
from .text_scanner import TextScanner, compile_pattern
from .xml_scanner import XmlScanner
from .yaml_scanner import YamlScanner

__all__ = [
    "Entry",
    "IniScanner",
    "JsonScanner",
    "KeyValueDialect",
    "KeyValueScanner",
    "Location",
    "PropertiesScanner",
    "REGEX_PREFIX",
    "Scanner",
    "TextScanner",
    "XmlScanner",
    "YamlScanner",
    "compile_pattern",
    "stringify_value",
    "unquote",
    "values_match",
]
