from pathlib import Path

import pytest

from docsum.processor.exceptions import FileReadError
from docsum.processor.file_loader import FileLoader, is_pdf
from docsum.processor.models import SourceFile


class TestIsPdf:
    def test_accepts_pdf_mime_type(self) -> None:
        assert is_pdf(SourceFile(name="scan", raw_bytes=b"", mime_type="application/pdf"))

    def test_accepts_pdf_suffix(self) -> None:
        assert is_pdf(SourceFile(name="REPORT.PDF", raw_bytes=b""))

    def test_rejects_other_files(self) -> None:
        assert not is_pdf(SourceFile(name="notes.txt", raw_bytes=b"", mime_type="text/plain"))


class TestFileLoader:
    def test_reads_bytes_and_guesses_mime_type(self, tmp_path: Path) -> None:
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.4 test")
        source = FileLoader().load(path)
        assert source.name == "report.pdf"
        assert source.raw_bytes == b"%PDF-1.4 test"
        assert source.mime_type == "application/pdf"

    def test_unknown_type_has_empty_mime_type(self, tmp_path: Path) -> None:
        path = tmp_path / "data.unknownext"
        path.write_bytes(b"x")
        assert FileLoader().load(path).mime_type == ""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError, match="File not found"):
            FileLoader().load(tmp_path / "missing.pdf")

    def test_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError, match="File not found"):
            FileLoader().load(tmp_path)

    def test_load_all_keeps_order(self, tmp_path: Path) -> None:
        paths = []
        for name in ("b.pdf", "a.pdf"):
            path = tmp_path / name
            path.write_bytes(name.encode())
            paths.append(path)
        assert [f.name for f in FileLoader().load_all(paths)] == ["b.pdf", "a.pdf"]
