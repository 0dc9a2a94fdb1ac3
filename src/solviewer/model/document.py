"""
Document Model
==============
Immutable snapshot of a decoded SOL file: the header plus the ordered tree of
named values.

Why is this file needed?
------------------------
1. Decoupling: The views never touch the decoder library's objects, only these
   plain dataclasses.
2. Safety: Every class is frozen, so a document handed to the UI thread cannot
   be changed behind its back. A new load replaces the whole document.

Classes:
    AMFVersion: The AMF encoding used for the body.
    Header: File name, AMF version and declared length.
    Element: A named value.
    ClassDefinition: Class name and static property names of a typed object.
    Value variants: Number, Bool, String, Integer, Object, Null, Undefined,
        XML, Unsupported, ECMAArray, StrictArray, Date, ByteArray, Dictionary.
    Document: Header + body.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional, Tuple, Union


class AMFVersion(IntEnum):
    """AMF encoding of the body, as stored in the last header byte."""
    AMF0 = 0
    AMF3 = 3

    def __str__(self) -> str:
        return self.name


# --- VALUE VARIANTS ---

@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Integer:
    """AMF3 only."""
    value: int


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Undefined:
    pass


@dataclass(frozen=True)
class Unsupported:
    """Marker for anything the decoder produced that has no dedicated variant."""
    pass


@dataclass(frozen=True)
class XML:
    """`flag` is True for AMF3 E4X XML (0x0B), False for XMLDocument and AMF0 XML."""
    content: str
    flag: bool = False


@dataclass(frozen=True)
class ClassDefinition:
    name: str = ""
    static_properties: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Object:
    children: Tuple[Element, ...] = ()
    class_def: Optional[ClassDefinition] = None


@dataclass(frozen=True)
class ECMAArray:
    elements: Tuple[Element, ...] = ()


@dataclass(frozen=True)
class StrictArray:
    values: Tuple[Value, ...] = ()


@dataclass(frozen=True)
class Date:
    value: datetime.datetime


@dataclass(frozen=True)
class ByteArray:
    data: bytes = b""


@dataclass(frozen=True)
class Dictionary:
    pairs: Tuple[Tuple[Value, Value], ...] = ()


Value = Union[
    Number, Bool, String, Integer, Object, Null, Undefined, XML, Unsupported,
    ECMAArray, StrictArray, Date, ByteArray, Dictionary,
]


# --- DOCUMENT ---

@dataclass(frozen=True)
class Element:
    name: str
    value: Value


@dataclass(frozen=True)
class Header:
    name: str
    format_version: AMFVersion
    length: int


EMPTY_NAME = "Not Loaded"


@dataclass(frozen=True)
class Document:
    """
    A decoded SOL file.

    A header length of 0 marks the placeholder shown before anything has been
    loaded (see `empty`).
    """
    header: Header
    body: Tuple[Element, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> Document:
        return cls(header=Header(name=EMPTY_NAME, format_version=AMFVersion.AMF0, length=0))

    @property
    def is_empty(self) -> bool:
        return self.header.length == 0

    def with_name(self, name: str) -> Document:
        """Copy of this document with a different header name."""
        return replace(self, header=replace(self.header, name=name))
