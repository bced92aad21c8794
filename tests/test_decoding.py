import pytest
from fastapi.testclient import TestClient

from cutsheet.decoding import decode_upload
from cutsheet.main import app


def test_utf8_is_decoded_as_is():
    text, report = decode_upload("a;Línea\r\nb".encode("utf-8"))
    assert text == "a;Línea\r\nb"
    assert report == {"detected": None, "decode_used": "utf-8", "decode_fallback": False, "bom": False}


def test_utf8_bom_is_dropped():
    text, report = decode_upload(b"\xef\xbb\xbf;;;Juan")
    assert text == ";;;Juan"
    assert report["bom"] is True
    assert report["decode_used"] == "utf-8-sig"


def test_non_utf8_uses_detected_encoding():
    raw = ("Fecha;Línea;Operación;Año\n" * 20).encode("cp1252")
    text, report = decode_upload(raw)
    assert report["decode_used"] != "utf-8"
    assert report["detected"] is not None
    assert text.startswith("Fecha;L")
    assert text.count("\n") == 20


def test_line_endings_are_left_alone():
    text, _ = decode_upload(b"a\r\nb\rc\n")
    assert text == "a\r\nb\rc\n"


class _NoGuess:
    def best(self):
        return None


class _Guess:
    def __init__(self, encoding):
        self.encoding = encoding

    def best(self):
        return self


def test_no_guess_falls_back_to_replacement(monkeypatch):
    monkeypatch.setattr("cutsheet.decoding.from_bytes", lambda raw: _NoGuess())
    text, report = decode_upload(b";;;Juan\n;d;l\xff;1")
    assert text == ";;;Juan\n;d;l\ufffd;1"
    assert report == {"detected": None, "decode_used": "utf-8", "decode_fallback": True, "bom": False}


@pytest.mark.parametrize("guess", ["ascii", "not-a-codec"])
def test_unusable_guess_falls_back_to_replacement(monkeypatch, guess):
    monkeypatch.setattr("cutsheet.decoding.from_bytes", lambda raw: _Guess(guess))
    text, report = decode_upload(b"a\xffb")
    assert text == "a\ufffdb"
    assert report["detected"] == guess
    assert report["decode_used"] == "utf-8"
    assert report["decode_fallback"] is True


def test_replacement_is_reported_as_warning(monkeypatch):
    monkeypatch.setattr("cutsheet.decoding.from_bytes", lambda raw: _NoGuess())
    client = TestClient(app)
    files = {"file": ("a.csv", b";;;Juan\n;2024-01-01;L\xff;1\n", "text/csv")}
    r = client.post("/reshape", files=files)
    assert r.status_code == 200
    report = r.json()["report"]
    assert report["encoding"]["decode_fallback"] is True
    assert report["warnings"] == [
        "Input was not valid text in any detected encoding; undecodable bytes were replaced"
    ]
    assert report["summary"]["records"] == 1
