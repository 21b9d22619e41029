from __future__ import annotations

import io
from pathlib import Path
from typing import Callable
import sys

import pytest
from PIL import Image
from pypdf import PdfReader, PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def page_widths(data: bytes) -> list[float]:
    """Return the mediabox widths of a serialized PDF, one per page."""

    return [float(page.mediabox.width) for page in PdfReader(io.BytesIO(data)).pages]


@pytest.fixture()
def widths_of() -> Callable[[bytes], list[float]]:
    return page_widths


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    """Create ``pages``-page PDFs whose page ``n`` is ``100 + n`` points wide."""

    def _create(filename: str = "document.pdf", pages: int = 10, title: str | None = None) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for number in range(1, pages + 1):
            writer.add_blank_page(width=100 + number, height=200)
        if title is not None:
            writer.add_metadata({"/Title": title})
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for number in range(1, 11):
        writer.add_blank_page(width=100 + number, height=200)
    writer.add_metadata(
        {
            "/Title": "Sample",
            "/Author": "pdftoolbox-tests",
            "/Subject": "Page ranges",
            "/Creator": "pytest",
            "/Producer": "pdftoolbox-tests",
        }
    )
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def sample_bytes(sample_pdf: Path) -> bytes:
    return sample_pdf.read_bytes()


@pytest.fixture()
def letter_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "letter.pdf"
    writer = PdfWriter()
    for _ in range(3):
        writer.add_blank_page(width=612, height=792)
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def encrypted_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "locked.pdf"
    writer = PdfWriter()
    for _ in range(2):
        writer.add_blank_page(width=200, height=200)
    writer.encrypt(user_password="secret", owner_password="owner", algorithm="RC4-128")
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


def _image_bytes(image_format: str, size: tuple[int, int], color: str) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture()
def png_image() -> bytes:
    return _image_bytes("PNG", (120, 80), "red")


@pytest.fixture()
def jpeg_image() -> bytes:
    return _image_bytes("JPEG", (64, 96), "blue")


@pytest.fixture()
def gif_image() -> bytes:
    return _image_bytes("GIF", (10, 10), "green")
