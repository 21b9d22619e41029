from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Callable, Iterator
from urllib.parse import quote
from zipfile import ZipFile

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader

from pdftoolbox.api import app
from pdftoolbox.config import Settings


client = TestClient(app)


def _upload(path: Path) -> tuple[str, bytes, str]:
    return (path.name, path.read_bytes(), "application/pdf")


@pytest.fixture()
def small_upload_limit() -> Iterator[None]:
    original = app.state.settings
    app.state.settings = Settings(max_upload_mb=1)
    try:
        yield
    finally:
        app.state.settings = original


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_info(sample_pdf: Path) -> None:
    response = client.post("/info", files={"file": _upload(sample_pdf)})

    assert response.status_code == 200
    payload = response.json()
    assert payload["num_pages"] == 10
    assert payload["title"] == "Sample"
    assert payload["is_encrypted"] is False


def test_info_rejects_invalid_pdf() -> None:
    response = client.post("/info", files={"file": ("bad.pdf", b"not a pdf", "application/pdf")})

    assert response.status_code == 422


def test_info_rejects_empty_upload() -> None:
    response = client.post("/info", files={"file": ("empty.pdf", b"", "application/pdf")})

    assert response.status_code == 400


def test_info_for_encrypted_pdf(encrypted_pdf: Path) -> None:
    locked = client.post("/info", files={"file": _upload(encrypted_pdf)})
    unlocked = client.post("/info", files={"file": _upload(encrypted_pdf)}, data={"password": "secret"})

    assert locked.status_code == 422
    assert unlocked.status_code == 200
    assert unlocked.json()["num_pages"] == 2


def test_split_returns_zip_and_skipped_segments(sample_pdf: Path) -> None:
    response = client.post(
        "/split",
        files={"file": _upload(sample_pdf)},
        data={"ranges": "1-3, 5, 0, 9-4"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert "sample_split.zip" in response.headers["content-disposition"]
    assert response.headers["x-pdftoolbox-document-count"] == "2"
    assert json.loads(response.headers["x-pdftoolbox-skipped"]) == [
        {"text": "0", "reason": "out_of_range"},
        {"text": "9-4", "reason": "reversed"},
    ]

    with ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["pages_1-3.pdf", "page_5.pdf"]
        assert len(PdfReader(io.BytesIO(archive.read("pages_1-3.pdf"))).pages) == 3


def test_split_with_non_ascii_filename(sample_bytes: bytes) -> None:
    response = client.post(
        "/split",
        files={"file": ("报告.pdf", sample_bytes, "application/pdf")},
        data={"ranges": "1-2"},
    )

    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert disposition == f"attachment; filename*=utf-8''{quote('报告_split.zip')}"
    with ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["pages_1-2.pdf"]


def test_split_without_ranges_uses_every_page(pdf_factory: Callable[..., Path]) -> None:
    response = client.post("/split", files={"file": _upload(pdf_factory("four.pdf", pages=4))})

    assert response.status_code == 200
    with ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["pages_1-4.pdf"]


def test_split_with_nothing_selected_is_a_bad_request(sample_pdf: Path) -> None:
    response = client.post("/split", files={"file": _upload(sample_pdf)}, data={"ranges": "abc, 12"})

    assert response.status_code == 400
    assert "valid page range" in response.json()["detail"]


def test_merge(pdf_factory: Callable[..., Path]) -> None:
    files = [
        ("files", _upload(pdf_factory("a.pdf", pages=1))),
        ("files", _upload(pdf_factory("b.pdf", pages=2))),
    ]

    response = client.post("/merge", files=files)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert len(PdfReader(io.BytesIO(response.content)).pages) == 3


def test_compress(letter_pdf: Path) -> None:
    response = client.post("/compress", files={"file": _upload(letter_pdf)}, data={"level": "high"})

    assert response.status_code == 200
    assert int(response.headers["x-pdftoolbox-original-size"]) == letter_pdf.stat().st_size
    assert int(response.headers["x-pdftoolbox-compressed-size"]) == len(response.content)


def test_compress_rejects_unknown_level(letter_pdf: Path) -> None:
    response = client.post("/compress", files={"file": _upload(letter_pdf)}, data={"level": "extreme"})

    assert response.status_code == 400


def test_upload_limit(small_upload_limit: None) -> None:
    oversized = b"%PDF-1.4\n" + b"0" * (1024 * 1024)

    response = client.post("/info", files={"file": ("big.pdf", oversized, "application/pdf")})

    assert response.status_code == 413
