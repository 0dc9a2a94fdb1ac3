"""
Shared fixtures: hand-built SOL byte strings for AMF0 and AMF3 documents.
"""
import os
import struct

import pytest

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


HEADER_SIGNATURE = b"TCSO\x00\x04\x00\x00\x00\x00"


# --- AMF0 ---

def amf0_name(text: str) -> bytes:
    data = text.encode("utf-8")
    return struct.pack(">H", len(data)) + data


def amf0_number(value: float) -> bytes:
    return b"\x00" + struct.pack(">d", value)


def amf0_bool(value: bool) -> bytes:
    return b"\x01" + (b"\x01" if value else b"\x00")


def amf0_string(value: str) -> bytes:
    return b"\x02" + amf0_name(value)


def amf0_object(*pairs) -> bytes:
    return b"\x03" + b"".join(amf0_name(k) + v for k, v in pairs) + b"\x00\x00\x09"


def amf0_typed_object(class_name: str, *pairs) -> bytes:
    return b"\x10" + amf0_name(class_name) + b"".join(amf0_name(k) + v for k, v in pairs) + b"\x00\x00\x09"


def amf0_strict_array(*values) -> bytes:
    return b"\x0a" + struct.pack(">L", len(values)) + b"".join(values)


AMF0_NULL = b"\x05"
AMF0_UNDEFINED = b"\x06"
AMF0_UNSUPPORTED = b"\x0d"


# --- AMF3 ---

def amf3_name(text: str) -> bytes:
    data = text.encode("utf-8")
    # Inline string, only short strings are needed here
    assert len(data) < 64
    return bytes([(len(data) << 1) | 1]) + data


def amf3_integer(value: int) -> bytes:
    assert 0 <= value < 0x80
    return b"\x04" + bytes([value])


def amf3_double(value: float) -> bytes:
    return b"\x05" + struct.pack(">d", value)


def amf3_string(value: str) -> bytes:
    return b"\x06" + amf3_name(value)


def amf3_anonymous_object(*pairs) -> bytes:
    # Inline object, inline dynamic traits, no sealed members, empty class name
    return b"\x0a\x0b" + amf3_name("") + b"".join(amf3_name(k) + v for k, v in pairs) + amf3_name("")


def amf3_typed_object(class_name: str, *pairs) -> bytes:
    """Sealed class: member names in the traits, then the values in the same order."""
    assert len(pairs) < 8
    # Inline object, inline traits, not dynamic, member count in the high bits
    traits = bytes([(len(pairs) << 4) | 0x03])
    names = b"".join(amf3_name(k) for k, _ in pairs)
    values = b"".join(v for _, v in pairs)
    return b"\x0a" + traits + amf3_name(class_name) + names + values


def amf3_xml_document(content: str) -> bytes:
    return b"\x07" + amf3_name(content)


def amf3_xml(content: str) -> bytes:
    return b"\x0b" + amf3_name(content)


AMF3_TRUE = b"\x03"
AMF3_NULL = b"\x01"


# --- CONTAINER ---

def build_sol(name: str, version: int, elements, name_encoder=None) -> bytes:
    """
    Wrap (name, encoded value) pairs in a SOL container.
    Each value is followed by a padding byte.
    """
    if name_encoder is None:
        name_encoder = amf3_name if version == 3 else amf0_name

    body = b"".join(name_encoder(n) + v + b"\x00" for n, v in elements)
    rest = HEADER_SIGNATURE + amf0_name(name) + b"\x00\x00\x00" + bytes([version]) + body
    return b"\x00\xbf" + struct.pack(">L", len(rest)) + rest


@pytest.fixture
def amf0_sol() -> bytes:
    return build_sol("settings", 0, [
        ("volume", amf0_number(0.75)),
        ("muted", amf0_bool(False)),
        ("player", amf0_string("alice")),
        ("nothing", AMF0_NULL),
        ("missing", AMF0_UNDEFINED),
        ("score", amf0_number(5.0)),
    ])


@pytest.fixture
def amf3_sol() -> bytes:
    return build_sol("test", 3, [
        ("x", amf3_integer(5)),
        ("ratio", amf3_double(1.5)),
        ("label", amf3_string("hi")),
        ("flag", AMF3_TRUE),
        ("none", AMF3_NULL),
    ])


@pytest.fixture
def sol_file(tmp_path, amf0_sol):
    path = tmp_path / "settings.sol"
    path.write_bytes(amf0_sol)
    return path
