# deployer/candid/parser.py

"""
Reference parser for textual Candid values.

Reads back what encoder.py writes (and the hand-written argument strings of
the old deploy scripts): records, variants, opt, vec, principal, blob, text,
numbers with `_` separators, bools and null. Type annotations like
`(9 : nat8)` are accepted and dropped.
"""

import re
from typing import Any, List, NamedTuple, Tuple

from .values import Blob, Field, Opt, Principal, Record, Variant


class CandidParseError(ValueError):
    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at offset {position}")
        self.position = position


class Token(NamedTuple):
    kind: str  # "punct", "ident", "text", "number"
    value: Any
    position: int


TOKEN_SPEC = [
    ("skip", r"\s+|//[^\n]*|/\*.*?\*/"),
    ("text", r'"(?:[^"\\]|\\.)*"'),
    ("number", r"[+-]?(?:0x[0-9a-fA-F_]+|[0-9][0-9_]*)"),
    ("ident", r"[A-Za-z_][A-Za-z0-9_]*"),
    ("punct", r"[(){};=,:]"),
]
TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in TOKEN_SPEC), re.S)

HEX_ESCAPE = re.compile(r"[0-9a-fA-F]{2}")
SIMPLE_UNESCAPES = {"n": b"\n", "r": b"\r", "t": b"\t", "\\": b"\\", '"': b'"', "'": b"'"}


def _unescape(literal: str, position: int) -> bytes:
    """Decode the body of a quoted literal to raw bytes"""
    body = literal[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\":
            out.extend(char.encode("utf-8"))
            i += 1
            continue

        nxt = body[i + 1]
        if nxt in SIMPLE_UNESCAPES:
            out.extend(SIMPLE_UNESCAPES[nxt])
            i += 2
        elif nxt == "u" and body[i + 2:i + 3] == "{":
            end = body.index("}", i)
            out.extend(chr(int(body[i + 3:end].replace("_", ""), 16)).encode("utf-8"))
            i = end + 1
        elif HEX_ESCAPE.match(body, i + 1):
            out.append(int(body[i + 1:i + 3], 16))
            i += 3
        else:
            raise CandidParseError(f"Invalid escape '\\{nxt}'", position + i + 1)
    return bytes(out)


def tokenize(source: str) -> List[Token]:
    tokens = []
    pos = 0
    while pos < len(source):
        match = TOKEN_RE.match(source, pos)
        if not match:
            raise CandidParseError(f"Unexpected character {source[pos]!r}", pos)
        kind = match.lastgroup
        raw = match.group()
        if kind == "text":
            tokens.append(Token("text", _unescape(raw, pos), pos))
        elif kind == "number":
            tokens.append(Token("number", int(raw.replace("_", ""), 0), pos))
        elif kind != "skip":
            tokens.append(Token(kind, raw, pos))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0

    # -- token helpers

    def peek(self, offset: int = 0):
        i = self.index + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise CandidParseError("Unexpected end of input", len(self.source))
        self.index += 1
        return token

    def at(self, kind: str, value: Any = None) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind and (value is None or token.value == value)

    def expect(self, kind: str, value: Any = None) -> Token:
        token = self.next()
        if token.kind != kind or (value is not None and token.value != value):
            wanted = value if value is not None else kind
            raise CandidParseError(f"Expected {wanted!r}, got {token.value!r}", token.position)
        return token

    def text(self, token: Token) -> str:
        try:
            return token.value.decode("utf-8")
        except UnicodeDecodeError:
            raise CandidParseError("Text literal is not valid UTF-8", token.position)

    # -- grammar

    def parse_args(self) -> Tuple[Any, ...]:
        self.expect("punct", "(")
        values = []
        while not self.at("punct", ")"):
            values.append(self.parse_annotated())
            if not self.at("punct", ")"):
                self.expect("punct", ",")
        self.expect("punct", ")")
        self._expect_end()
        return tuple(values)

    def parse_single(self) -> Any:
        value = self.parse_value()
        self._expect_end()
        return value

    def _expect_end(self) -> None:
        token = self.peek()
        if token is not None:
            raise CandidParseError(f"Trailing input {token.value!r}", token.position)

    def parse_annotated(self) -> Any:
        value = self.parse_value()
        if self.at("punct", ":"):
            self.next()
            self._skip_type()
        return value

    def _skip_type(self) -> None:
        """Consume a type expression up to the next `,` or `)` at this level"""
        depth = 0
        while True:
            token = self.peek()
            if token is None:
                raise CandidParseError("Unexpected end of input in type", len(self.source))
            if token.kind == "punct":
                if depth == 0 and token.value in (",", ")"):
                    return
                if token.value in ("(", "{"):
                    depth += 1
                elif token.value in (")", "}"):
                    depth -= 1
            self.next()

    def parse_value(self) -> Any:
        token = self.next()

        if token.kind == "number":
            return token.value
        if token.kind == "text":
            return self.text(token)
        if token.kind == "punct" and token.value == "(":
            value = self.parse_annotated()
            self.expect("punct", ")")
            return value
        if token.kind != "ident":
            raise CandidParseError(f"Unexpected {token.value!r}", token.position)

        keyword = token.value
        if keyword == "null":
            return None
        if keyword in ("true", "false"):
            return keyword == "true"
        if keyword == "opt":
            return Opt(self.parse_value())
        if keyword == "principal":
            return Principal(self.text(self.expect("text")))
        if keyword == "blob":
            return Blob(self.expect("text").value)
        if keyword == "record":
            return self._parse_record()
        if keyword == "variant":
            return self._parse_variant()
        if keyword == "vec":
            return self._parse_vec()

        raise CandidParseError(f"Unknown keyword {keyword!r}", token.position)

    def _field_name(self) -> Any:
        token = self.next()
        if token.kind == "ident":
            return token.value
        if token.kind == "text":
            return self.text(token)
        if token.kind == "number":
            return token.value
        raise CandidParseError(f"Expected field name, got {token.value!r}", token.position)

    def _is_named_field(self) -> bool:
        first, second = self.peek(), self.peek(1)
        return (first is not None and second is not None
                and first.kind in ("ident", "text", "number")
                and second.kind == "punct" and second.value == "=")

    def _parse_record(self) -> Record:
        self.expect("punct", "{")
        fields = []
        position = 0
        while not self.at("punct", "}"):
            if self._is_named_field():
                name = self._field_name()
                self.expect("punct", "=")
                fields.append(Field(name, self.parse_value()))
            else:
                fields.append(Field(position, self.parse_value()))
                position += 1
            if not self.at("punct", "}"):
                self.expect("punct", ";")
        self.expect("punct", "}")
        return Record(tuple(fields))

    def _parse_variant(self) -> Variant:
        self.expect("punct", "{")
        tag = self._field_name()
        value = None
        if self.at("punct", "="):
            self.next()
            value = self.parse_value()
        if self.at("punct", ";"):
            self.next()
        self.expect("punct", "}")
        return Variant(str(tag), value)

    def _parse_vec(self) -> List[Any]:
        self.expect("punct", "{")
        items = []
        while not self.at("punct", "}"):
            items.append(self.parse_value())
            if not self.at("punct", "}"):
                self.expect("punct", ";")
        self.expect("punct", "}")
        return items


def parse_args(source: str) -> Tuple[Any, ...]:
    """Parse an argument tuple like `(variant { Init = record {...} })`"""
    return _Parser(source).parse_args()


def parse_value(source: str) -> Any:
    return _Parser(source).parse_single()
