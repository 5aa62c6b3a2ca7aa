# deployer/candid/encoder.py

"""
Textual Candid encoder.

Produces the argument syntax `dfx deploy --argument` expects, e.g.

    (variant {
        Init = record {
            token_name = "ICP Solana";
            decimals = opt 9;
        }
    })

Numbers are written as plain decimal literals, one field per line.
"""

import re
from typing import Any

from ..types.errors import SerializationError
from .values import Blob, Opt, Principal, Record, Variant


INDENT = "    "

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

KEYWORDS = frozenset({
    "blob", "bool", "composite_query", "empty", "false", "float32", "float64",
    "func", "import", "int", "int8", "int16", "int32", "int64", "nat", "nat8",
    "nat16", "nat32", "nat64", "null", "oneway", "opt", "principal", "query",
    "record", "reserved", "service", "text", "true", "type", "variant", "vec",
})

SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def encode_text(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializationError(f"Text is not valid UTF-8: {e.reason}",
                                 {"position": e.start})

    parts = ['"']
    for char in value:
        if char in SIMPLE_ESCAPES:
            parts.append(SIMPLE_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7f:
            parts.append(f"\\{ord(char):02x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def encode_blob(data: bytes) -> str:
    return 'blob "' + "".join(f"\\{byte:02x}" for byte in data) + '"'


def encode_field_name(name) -> str:
    if isinstance(name, int):
        return str(name)
    if IDENTIFIER.match(name) and name not in KEYWORDS:
        return name
    return encode_text(name)


def encode_value(value: Any, level: int = 0) -> str:
    # bool before int: bool is an int subclass
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return encode_text(value)
    if isinstance(value, Principal):
        return f"principal {encode_text(value.text)}"
    if isinstance(value, Blob):
        return encode_blob(value.data)
    if isinstance(value, Opt):
        return f"opt {encode_value(value.value, level)}"
    if isinstance(value, Record):
        return _encode_record(value, level)
    if isinstance(value, Variant):
        return _encode_variant(value, level)
    if isinstance(value, (list, tuple)):
        return _encode_vec(value, level)

    raise SerializationError(f"Cannot represent {type(value).__name__} as a Candid value",
                             {"value": repr(value)})


def _encode_record(value: Record, level: int) -> str:
    if not value.fields:
        return "record {}"

    pad = INDENT * (level + 1)
    positional = value.is_tuple()
    lines = ["record {"]
    for field in value.fields:
        encoded = encode_value(field.value, level + 1)
        if positional:
            lines.append(f"{pad}{encoded};")
        else:
            lines.append(f"{pad}{encode_field_name(field.name)} = {encoded};")
    lines.append(f"{INDENT * level}}}")
    return "\n".join(lines)


def _encode_variant(value: Variant, level: int) -> str:
    tag = encode_field_name(value.tag)
    if value.value is None:
        return f"variant {{ {tag} }}"

    encoded = encode_value(value.value, level + 1)
    if "\n" not in encoded:
        return f"variant {{ {tag} = {encoded} }}"

    return f"variant {{\n{INDENT * (level + 1)}{tag} = {encoded}\n{INDENT * level}}}"


def _encode_vec(items, level: int) -> str:
    if not items:
        return "vec {}"

    pad = INDENT * (level + 1)
    lines = ["vec {"]
    for item in items:
        lines.append(f"{pad}{encode_value(item, level + 1)};")
    lines.append(f"{INDENT * level}}}")
    return "\n".join(lines)


def encode_args(*values: Any) -> str:
    """Encode an argument tuple: `(v1, v2, ...)`"""
    return "(" + ", ".join(encode_value(value) for value in values) + ")"
