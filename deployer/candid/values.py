# deployer/candid/values.py

"""
Candid value model used for canister arguments.

Plain Python values map directly:
    None -> null, bool -> bool, int -> nat/int, str -> text, list -> vec

Everything else has a wrapper struct below.
"""

from typing import Any, Dict, Optional, Tuple, Union

from msgspec import Struct


FieldName = Union[str, int]


class Principal(Struct, frozen=True):
    text: str


class Blob(Struct, frozen=True):
    data: bytes

    @classmethod
    def from_hex(cls, value: str) -> 'Blob':
        return cls(bytes.fromhex(value))


class Opt(Struct, frozen=True):
    value: Any


class Variant(Struct, frozen=True):
    tag: str
    value: Any = None


class Field(Struct, frozen=True):
    name: FieldName
    value: Any


class Record(Struct, frozen=True):
    fields: Tuple[Field, ...] = ()

    def get(self, name: FieldName, default: Any = None) -> Any:
        for field in self.fields:
            if field.name == name:
                return field.value
        return default

    def __contains__(self, name: FieldName) -> bool:
        return any(field.name == name for field in self.fields)

    def names(self) -> Tuple[FieldName, ...]:
        return tuple(field.name for field in self.fields)

    def is_tuple(self) -> bool:
        return all(field.name == i for i, field in enumerate(self.fields))

    def as_dict(self) -> Dict[FieldName, Any]:
        return {field.name: field.value for field in self.fields}


def record(*pairs: Tuple[FieldName, Any], **named: Any) -> Record:
    """Build a record from (name, value) pairs and/or keyword fields, keeping order."""
    fields = [Field(name, value) for name, value in pairs]
    fields.extend(Field(name, value) for name, value in named.items())
    return Record(tuple(fields))


def tuple_record(*values: Any) -> Record:
    return Record(tuple(Field(i, value) for i, value in enumerate(values)))


def opt(value: Optional[Any]) -> Any:
    """`opt value`, or `null` when value is None"""
    return None if value is None else Opt(value)
