"""
Decoder Adapter (pyamf)
=======================
Turns the raw bytes of a .sol file into a Document.

Why is this file needed?
------------------------
1. Boundary: pyamf does the AMF0/AMF3 value decoding. This module reads the
   SOL container around it (header, name, version, padding) and converts the
   Python objects pyamf returns into the frozen Value variants of the model.
2. Fidelity: pyamf drops some facts the file carries (AMF3 sealed member
   names, the AMF0 unsupported marker, which AMF3 XML type was used). The two
   decoder subclasses below note them in a DecodeNotes record while reading.
3. Errors: Every failure is raised as a typed LoadError (FileIOError or
   DecodeFailure) so the caller never sees library specific exceptions.

Layout of a SOL file:
    00 BF                 version marker
    uint32                length of everything that follows
    "TCSO" 00 04 00 00 00 00
    uint16 + utf-8        name
    00 00 00              padding
    uint8                 AMF version (0 or 3)
    (name, value, 00)*    body
"""
from __future__ import annotations

import datetime
import logging
from typing import Any, Dict, FrozenSet, List, Optional, Set

import pyamf
from pyamf import amf0, amf3, util
from pyamf import xml as amf_xml

from solviewer.model.document import (
    AMFVersion, Bool, ByteArray, ClassDefinition, Date, Dictionary, Document,
    ECMAArray, Element, Header, Integer, Null, Number, Object, StrictArray,
    String, Undefined, Unsupported, Value, XML,
)
from solviewer.model.errors import DecodeFailure, FileIOError

logger = logging.getLogger(__name__)

HEADER_VERSION = b"\x00\xbf"
HEADER_SIGNATURE = b"TCSO\x00\x04\x00\x00\x00\x00"
PADDING_BYTE = b"\x00"

# Exceptions pyamf and its byte stream raise on malformed input
_DECODER_ERRORS = (pyamf.BaseError, EOFError, IOError, ValueError, TypeError, KeyError)


class _UnsupportedMarker:
    """Decoded form of the AMF0 unsupported type (0x0D)."""

    def __repr__(self) -> str:
        return "UNSUPPORTED_MARKER"


UNSUPPORTED_MARKER = _UnsupportedMarker()


class DecodeNotes:
    """
    Facts about decoded objects that pyamf does not keep, keyed by id().

    Noted objects are held until the document is converted, so their ids are
    never reused by a later value.
    """

    def __init__(self) -> None:
        self.class_defs: Dict[int, ClassDefinition] = {}
        self.xml_strings: Set[int] = set()
        self.dictionaries: Set[int] = set()
        self._held: List[Any] = []

    def note_class(self, obj: Any, class_def: ClassDefinition) -> None:
        self._held.append(obj)
        self.class_defs[id(obj)] = class_def

    def note_xml_string(self, root: Any) -> None:
        self._held.append(root)
        self.xml_strings.add(id(root))

    def note_dictionary(self, pairs: dict) -> None:
        self._held.append(pairs)
        self.dictionaries.add(id(pairs))


class AMF3Decoder(amf3.Decoder):
    """pyamf AMF3 decoder that records traits, E4X XML and Dictionaries."""

    def __init__(self, *args, notes: Optional[DecodeNotes] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.notes = notes if notes is not None else DecodeNotes()
        # One slot per readObject call in progress, filled by _getClassDefinition
        self._traits_stack: List[Optional[Any]] = []

    def readObject(self):
        self._traits_stack.append(None)
        try:
            obj = super().readObject()
        finally:
            class_def = self._traits_stack.pop()

        # References to earlier objects carry no traits, the first read recorded them
        if class_def is not None:
            self.notes.note_class(obj, ClassDefinition(
                name=_text(class_def.alias.alias or ""),
                static_properties=tuple(_text(p) for p in class_def.static_properties),
            ))
        return obj

    def _getClassDefinition(self, ref):
        class_def = super()._getClassDefinition(ref)
        if self._traits_stack:
            self._traits_stack[-1] = class_def
        return class_def

    def readXMLString(self):
        root = self.readXML()
        self.notes.note_xml_string(root)
        return root

    def readDictionary(self):
        # pyamf returns (pairs, weak_keys), the weak keys flag is not shown
        pairs, _weak_keys = super().readDictionary()
        self.notes.note_dictionary(pairs)
        return pairs


class AMF0Decoder(amf0.Decoder):
    """pyamf AMF0 decoder that keeps the unsupported marker and hands AMF3 values to AMF3Decoder."""

    def __init__(self, *args, notes: Optional[DecodeNotes] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.notes = notes if notes is not None else DecodeNotes()
        self._amf3_decoder: Optional[AMF3Decoder] = None

    def getTypeFunc(self, data):
        if data == amf0.TYPE_UNSUPPORTED:
            return self.readUnsupported
        return super().getTypeFunc(data)

    def readUnsupported(self):
        return UNSUPPORTED_MARKER

    def readAMF3(self):
        if self._amf3_decoder is None:
            self._amf3_decoder = AMF3Decoder(
                stream=self.stream, timezone_offset=self.timezone_offset, notes=self.notes,
            )
        return self._amf3_decoder.readElement()


def make_decoder(version: AMFVersion, stream: util.BufferedByteStream, notes: DecodeNotes):
    if version is AMFVersion.AMF3:
        return AMF3Decoder(stream=stream, notes=notes)
    return AMF0Decoder(stream=stream, notes=notes)


def load_document(path: str) -> Document:
    """
    Read a .sol file from disk and decode it.

    Raises:
        FileIOError: The file could not be read.
        DecodeFailure: The content is not a valid SOL document.
    """
    logger.info(f"Reading SOL file: {path}")
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FileIOError(f"Could not read file: {e.strerror or e}", path=path) from e

    try:
        return decode(data)
    except DecodeFailure as e:
        e.path = path
        raise


def decode(data: bytes) -> Document:
    """
    Decode a complete SOL file.

    The same bytes always produce an equal Document.
    """
    stream = util.BufferedByteStream(data)
    notes = DecodeNotes()

    try:
        header = _read_header(stream)
        decoder = make_decoder(header.format_version, stream, notes)
        converter = ValueConverter(header.format_version, notes)

        body = []
        while not stream.at_eof():
            name = decoder.readString()
            value = decoder.readElement()
            body.append(Element(name=_text(name), value=converter.convert(value)))

            # Each value is followed by one padding byte, the last one may be missing
            if not stream.at_eof() and stream.read(1) != PADDING_BYTE:
                raise DecodeFailure(f"Missing padding byte after element '{_text(name)}'")
    except _DECODER_ERRORS as e:
        raise DecodeFailure(f"Invalid SOL data: {e}") from e

    logger.debug(f"Decoded {len(body)} elements from '{header.name}' ({header.format_version})")
    return Document(header=header, body=tuple(body))


def _read_header(stream: util.BufferedByteStream) -> Header:
    if stream.read(2) != HEADER_VERSION:
        raise DecodeFailure("Unknown SOL version in header")

    length = stream.read_ulong()

    if stream.read(10) != HEADER_SIGNATURE:
        raise DecodeFailure("Invalid SOL signature")

    name_length = stream.read_ushort()
    name = stream.read_utf8_string(name_length)

    if stream.read(3) != PADDING_BYTE * 3:
        raise DecodeFailure("Invalid padding after SOL name")

    version = stream.read_uchar()
    try:
        format_version = AMFVersion(version)
    except ValueError:
        raise DecodeFailure(f"Unknown AMF version {version}") from None

    return Header(name=name, format_version=format_version, length=length)


class ValueConverter:
    """
    Maps the Python objects produced by pyamf onto Value variants.

    `seen` holds the ids of the containers on the current path, AMF references
    can form cycles and a cyclic container is reported as Unsupported.
    """

    def __init__(self, version: AMFVersion, notes: DecodeNotes) -> None:
        self.version = version
        self.notes = notes

    def convert(self, value: Any, seen: FrozenSet[int] = frozenset()) -> Value:
        if value is pyamf.Undefined:
            return Undefined()
        if value is None:
            return Null()
        if value is UNSUPPORTED_MARKER:
            return Unsupported()
        if isinstance(value, bool):
            return Bool(value)
        if isinstance(value, int):
            # AMF0 only knows doubles, pyamf turns whole ones into ints
            if self.version is AMFVersion.AMF3:
                return Integer(value)
            return Number(float(value))
        if isinstance(value, float):
            return Number(value)
        if isinstance(value, str):
            return String(value)
        if amf_xml.is_xml(value):
            return self._xml(value)
        if isinstance(value, datetime.datetime):
            return Date(value)
        if isinstance(value, amf3.ByteArray):
            return ByteArray(bytes(value.getvalue()))

        if id(value) in seen:
            logger.warning(f"Cyclic reference to {type(value).__name__}, shown as unsupported")
            return Unsupported()
        seen = seen | {id(value)}

        if id(value) in self.notes.dictionaries:
            return self._dictionary(value, seen)
        if isinstance(value, pyamf.MixedArray):
            return ECMAArray(elements=self._elements(value, seen))
        if isinstance(value, (list, tuple)):
            return StrictArray(values=tuple(self.convert(v, seen) for v in value))

        recorded = self.notes.class_defs.get(id(value))
        if isinstance(value, dict):
            if recorded is not None:
                return Object(children=self._elements(value, seen), class_def=recorded)
            if isinstance(value, pyamf.TypedObject):
                return Object(
                    children=self._elements(value, seen),
                    class_def=ClassDefinition(name=_text(value.alias)),
                )
            if all(isinstance(k, str) for k in value):
                # AMF0 anonymous objects have no traits
                return Object(children=self._elements(value, seen), class_def=None)
            return self._dictionary(value, seen)

        return self._registered(value, recorded, seen)

    def _xml(self, value: Any) -> XML:
        content = amf_xml.tostring(value)
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        return XML(content=content, flag=id(value) in self.notes.xml_strings)

    def _dictionary(self, value: dict, seen: FrozenSet[int]) -> Dictionary:
        return Dictionary(pairs=tuple(
            (self.convert(k, seen), self.convert(v, seen)) for k, v in value.items()
        ))

    def _elements(self, mapping: dict, seen: FrozenSet[int]) -> tuple:
        return tuple(
            Element(name=_text(k), value=self.convert(v, seen)) for k, v in mapping.items()
        )

    def _registered(self, value: Any, recorded: Optional[ClassDefinition], seen: FrozenSet[int]) -> Value:
        """Instances of classes registered with pyamf.register_class."""
        try:
            alias = pyamf.get_class_alias(type(value))
        except pyamf.UnknownClassAlias:
            logger.debug(f"No class alias for {type(value).__name__}, shown as unsupported")
            return Unsupported()

        attrs = alias.getEncodableAttributes(value) or {}
        class_def = recorded if recorded is not None else _alias_class_definition(alias)
        return Object(children=self._elements(attrs, seen), class_def=class_def)


def _text(value: Any) -> str:
    """Names as str, pyamf may hand back raw utf-8 bytes."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _alias_class_definition(alias: Any) -> ClassDefinition:
    name = alias.alias or ""
    static_attrs = alias.static_attrs or ()
    return ClassDefinition(name=_text(name), static_properties=tuple(_text(a) for a in static_attrs))
