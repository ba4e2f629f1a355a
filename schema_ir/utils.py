"""
Naming helpers shared by the builder and the emitters.
"""

import keyword
import re

from pydantic import BaseModel

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# ECMAScript reserved words that cannot be used as bare binding names
JS_RESERVED_WORDS = {
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "yield",
}


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
    """
    if not text:
        return ""
    words = _split_into_words(_normalize_separators(text))
    return "".join(word.capitalize() for word in words if word)


def snake_to_camel_case(text: str) -> str:
    """Convert text to camelCase ("user_address" -> "userAddress")."""
    pascal = snake_to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def is_js_identifier(name: str) -> bool:
    """Whether ``name`` can appear unquoted as a JavaScript property key."""
    return bool(_IDENTIFIER_PATTERN.match(name))


def js_binding_name(name: str, fallback: str = "ref") -> str:
    """Turn an arbitrary node name into a JavaScript binding name."""
    if is_js_identifier(name) and name not in JS_RESERVED_WORDS:
        return name
    candidate = snake_to_camel_case(name)
    if not candidate:
        return fallback
    if candidate[0].isdigit():
        candidate = "_" + candidate
    if candidate in JS_RESERVED_WORDS:
        candidate = "_" + candidate
    return candidate


def is_model_attribute_name(name: str) -> bool:
    """Whether ``name`` can be used directly as a pydantic model field name."""
    if not name.isidentifier() or keyword.iskeyword(name):
        return False
    if name.startswith("_") or name.startswith("model_"):
        return False
    return not hasattr(BaseModel, name)


def field_key(name: str, index: int) -> str:
    """Attribute name for a field; unusable names get a positional key and an alias."""
    if is_model_attribute_name(name):
        return name
    return f"field_{index}"
