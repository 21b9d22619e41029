from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner
from pypdf import PdfReader

from pdftoolbox.cli import cli


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_info(runner: CliRunner, sample_pdf: Path) -> None:
    result = runner.invoke(cli, ["info", str(sample_pdf)])

    assert result.exit_code == 0
    assert "Number of Pages" in result.output
    assert "Sample" in result.output


def test_split_writes_one_file_per_range(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "parts"

    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "1-3, 5, x, 7-9", "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in output_dir.iterdir()) == [
        "page_5.pdf",
        "pages_1-3.pdf",
        "pages_7-9.pdf",
    ]
    assert len(PdfReader(str(output_dir / "pages_7-9.pdf")).pages) == 3
    assert "1 segment(s) skipped" in result.output


def test_split_show_skipped(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli,
        ["split", str(sample_pdf), "-r", "2, 0, 9-4", "-o", str(tmp_path), "--show-skipped"],
    )

    assert result.exit_code == 0, result.output
    assert "'0' (out of range)" in result.output
    assert "'9-4' (reversed)" in result.output


def test_split_defaults_to_every_page(runner: CliRunner, pdf_factory: Callable[..., Path], tmp_path: Path) -> None:
    source = pdf_factory("short.pdf", pages=3)

    result = runner.invoke(cli, ["split", str(source), "-o", str(tmp_path / "all")])

    assert result.exit_code == 0, result.output
    assert [path.name for path in (tmp_path / "all").iterdir()] == ["pages_1-3.pdf"]


def test_split_with_nothing_selected_fails(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "0, 99", "-o", str(tmp_path / "none")])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "valid page range" in result.output


def test_merge(runner: CliRunner, pdf_factory: Callable[..., Path], tmp_path: Path) -> None:
    output = tmp_path / "merged.pdf"
    inputs = [str(pdf_factory("a.pdf", pages=2)), str(pdf_factory("b.pdf", pages=3))]

    result = runner.invoke(cli, ["merge", *inputs, "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert len(PdfReader(str(output)).pages) == 5


def test_rotate_and_delete(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    rotated = tmp_path / "rotated.pdf"
    trimmed = tmp_path / "trimmed.pdf"

    rotate = runner.invoke(cli, ["rotate", str(sample_pdf), "-p", "2:90", "-o", str(rotated)])
    delete = runner.invoke(cli, ["delete", str(rotated), "-p", "1, 3-10", "-o", str(trimmed)])

    assert rotate.exit_code == 0, rotate.output
    assert delete.exit_code == 0, delete.output
    reader = PdfReader(str(trimmed))
    assert len(reader.pages) == 1
    assert reader.pages[0].get("/Rotate") == 90


def test_rotate_rejects_malformed_rotation(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, ["rotate", str(sample_pdf), "-p", "two", "-o", str(tmp_path / "x.pdf")])

    assert result.exit_code != 0


def test_delete_every_page_fails(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, ["delete", str(sample_pdf), "-p", "1-10", "-o", str(tmp_path / "x.pdf")])

    assert result.exit_code == 1
    assert "Cannot delete every page" in result.output


def test_page_numbers_and_watermark(runner: CliRunner, letter_pdf: Path, tmp_path: Path) -> None:
    numbered = tmp_path / "numbered.pdf"
    marked = tmp_path / "marked.pdf"

    first = runner.invoke(
        cli, ["page-numbers", str(letter_pdf), "-o", str(numbered), "--format", "{n}/{total}"]
    )
    second = runner.invoke(
        cli, ["watermark", str(numbered), "-t", "DRAFT", "-o", str(marked), "--tiled", "--rotation", "0"]
    )

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    text = PdfReader(str(marked)).pages[1].extract_text()
    assert "2/3" in text
    assert "DRAFT" in text


def test_image_round_trip_commands(runner: CliRunner, letter_pdf: Path, tmp_path: Path) -> None:
    image_dir = tmp_path / "images"
    rebuilt = tmp_path / "rebuilt.pdf"

    to_images = runner.invoke(cli, ["to-images", str(letter_pdf), "-o", str(image_dir), "--dpi", "36"])
    images = sorted(str(path) for path in image_dir.iterdir())
    from_images = runner.invoke(cli, ["from-images", *images, "-o", str(rebuilt)])

    assert to_images.exit_code == 0, to_images.output
    assert images[0].endswith("page_1.png")
    assert from_images.exit_code == 0, from_images.output
    assert len(PdfReader(str(rebuilt)).pages) == 3


def test_compress(runner: CliRunner, letter_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "small.pdf"

    result = runner.invoke(cli, ["compress", str(letter_pdf), "-o", str(output), "-l", "high"])

    assert result.exit_code == 0, result.output
    assert len(PdfReader(io.BytesIO(output.read_bytes())).pages) == 3


def test_invalid_environment_setting_is_reported(
    runner: CliRunner, sample_pdf: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PDFTOOLBOX_SPLIT_WORKERS", "zero")

    result = runner.invoke(cli, ["info", str(sample_pdf)])

    assert result.exit_code == 1
    assert "PDFTOOLBOX_SPLIT_WORKERS" in result.output
