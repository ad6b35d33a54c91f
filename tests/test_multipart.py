import os, sys

import pytest

# Ensure project root on path for `import iconhost...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from iconhost.core.errors import MalformedMultipartError
from iconhost.icons import multipart


def _body(boundary: str, *parts: bytes) -> bytes:
    out = b""
    for p in parts:
        out += b"--" + boundary.encode() + b"\r\n" + p + b"\r\n"
    return out + b"--" + boundary.encode() + b"--\r\n"


def _field(name: str, value: bytes) -> bytes:
    return f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode() + value


def _file(name: str, filename: str, data: bytes, ctype: str = "application/octet-stream") -> bytes:
    head = (
        f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
        f"Content-Type: {ctype}\r\n\r\n"
    )
    return head.encode() + data


def test_multipart_file_and_field_success():
    body = _body("X", _file("file", "a.svg", b"<svg/>", "image/svg+xml"), _field("category", b"ui"))
    parts = multipart.parse(body, "X")

    assert len(parts) == 2
    file_part, field_part = parts
    assert file_part.name == "file"
    assert file_part.filename == "a.svg"
    assert file_part.is_file
    assert file_part.data == b"<svg/>"
    assert file_part.value is None

    assert field_part.name == "category"
    assert field_part.filename is None
    assert field_part.value == "ui"


def test_multipart_file_data_is_binary_safe_success():
    payload = b"\x89PNG\r\n\x1a\n\x00\x00 \r\n\r\n trailing spaces  \n"
    body = _body("b0undary", _field("category", b"  social \r\n"), _file("file", "x.png", payload))
    parts = multipart.parse(body, "b0undary")

    fields = multipart.fields_of(parts)
    assert fields == {"category": "social"}
    f = multipart.first_file(parts)
    assert f is not None
    # Not trimmed, CRLFs inside the payload kept
    assert f.data == payload


def test_multipart_last_segment_is_parsed_success():
    body = _body(
        "B",
        _field("a", b"1"),
        _field("b", b"2"),
        _field("c", b"3"),
    )
    parts = multipart.parse(body, "B")
    assert [p.name for p in parts] == ["a", "b", "c"]
    assert [p.value for p in parts] == ["1", "2", "3"]


def test_multipart_drops_parts_without_divider_or_name_success():
    body = _body(
        "B",
        b"garbage without header divider",
        b"Content-Disposition: form-data\r\n\r\nno name here",
        _field("ok", b"yes"),
    )
    parts = multipart.parse(body, "B")
    assert len(parts) == 1
    assert parts[0].name == "ok"


def test_multipart_multiline_field_value_success():
    body = _body("B", _field("description", "line one\r\nline two ü".encode("utf-8")))
    parts = multipart.parse(body, "B")
    assert parts[0].value == "line one\r\nline two ü"


def test_multipart_missing_closing_boundary_failure():
    body = b"--X\r\n" + _field("a", b"1") + b"\r\n"
    with pytest.raises(MalformedMultipartError) as exc:
        multipart.parse(body, "X")
    assert str(exc.value) == "invalid_multipart"


def test_multipart_missing_opening_boundary_failure():
    with pytest.raises(MalformedMultipartError):
        multipart.parse(b"no boundaries at all", "X")
    with pytest.raises(MalformedMultipartError):
        multipart.parse(b"--X--", "")


@pytest.mark.parametrize(
    "header,expected",
    [
        ("multipart/form-data; boundary=abc123", "abc123"),
        ('multipart/form-data; boundary="quoted-b"', "quoted-b"),
        ("Multipart/Form-Data; charset=utf-8; BOUNDARY=zz", "zz"),
        ("application/json", None),
        ("multipart/form-data", None),
        (None, None),
    ],
)
def test_multipart_boundary_from_content_type_success(header, expected):
    assert multipart.boundary_from_content_type(header) == expected
