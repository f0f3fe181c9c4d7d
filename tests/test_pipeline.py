"""Tests for document extraction, batching and aggregation."""

from __future__ import annotations

from pathlib import Path

import pytest

from statement_recon.errors import DocumentReadError, PasswordRequiredError
from statement_recon.extractor.pipeline import (
    build_enrichment_index,
    collect_codes,
    collect_records,
    extract_batch,
    extract_document,
    extract_grid_document,
    extract_text_document,
    first_metadata,
    selected_results,
)
from statement_recon.extractor.types import CodeRecord, SheetResult
from statement_recon.variants import BidvVariant

PIPELINE = "statement_recon.extractor.pipeline"


@pytest.fixture
def fake_readers(monkeypatch: pytest.MonkeyPatch, bidv_grid, bidv_pdf_text) -> list[tuple[str, str | None]]:
    """Replace both readers; ``locked.pdf`` only opens with ``secret``."""
    calls: list[tuple[str, str | None]] = []

    def read_workbook(path):
        calls.append((Path(path).name, None))
        if Path(path).name == "broken.xlsx":
            raise DocumentReadError(path, "not a zip file")
        return {"DS": bidv_grid}

    def read_pdf_text(path, password=None):
        calls.append((Path(path).name, password))
        if Path(path).name == "locked.pdf" and password != "secret":
            raise PasswordRequiredError(path, attempted=password is not None)
        return bidv_pdf_text

    monkeypatch.setattr(f"{PIPELINE}.read_workbook", read_workbook)
    monkeypatch.setattr(f"{PIPELINE}.read_pdf_text", read_pdf_text)
    return calls


# =============================================================================
# Grid documents
# =============================================================================


class TestExtractGridDocument:
    """Tests for extract_grid_document()."""

    def test_matched_sheet(self, bidv_grid) -> None:
        """A matched sheet carries codes, records and metadata."""
        (result,) = extract_grid_document({"DS": bidv_grid}, "june.xlsx")
        assert result.ok and result.included
        assert result.variant == "bidv"
        assert result.codes == ("X000001", "X000002", "X000001")
        assert result.institution == "Ngân hàng BIDV"
        assert result.statement_date == "01/06/2024"
        assert result.id.startswith("june.xlsx-DS-")

    def test_empty_sheet(self, bidv_grid) -> None:
        """Empty sheets are reported and excluded."""
        blank, matched = extract_grid_document({"Blank": [[None, ""]], "DS": bidv_grid}, "june.xlsx")
        assert blank.error == "empty sheet"
        assert not blank.included
        assert matched.ok
        assert blank.id != matched.id

    def test_declined_sheet_of_matched_document(self, momo_grid) -> None:
        """The winning variant's declined sheets report a missing header."""
        summary, data = extract_grid_document({"Tổng hợp": [["Tổng hợp"]], "data": momo_grid}, "momo.xlsx")
        assert summary.error == "no header found"
        assert summary.variant == "momo"
        assert data.codes == ("PE123", "X998877")
        assert data.institution == "Ví Momo"

    def test_declined_sheet_keeps_metadata(self, bidv_grid) -> None:
        """A declined sheet of a claimed document still reports institution and date."""
        summary = [["Người thu:", "Ngân hàng BIDV CN Hà Tĩnh"], ["Ngày thu:", 45444]]
        data, extra = extract_grid_document({"DS": bidv_grid, "Summary": summary}, "june.xlsx")
        assert data.ok
        assert extra.error == "no header found"
        assert extra.variant == "bidv"
        assert extra.institution == "Ngân hàng BIDV CN Hà Tĩnh"
        assert extra.statement_date == "01/06/2024"

        _, extra = extract_grid_document({"DS": bidv_grid, "Summary": summary}, "june.xlsx", extract_metadata=False)
        assert extra.institution is None
        assert extra.statement_date is None

    def test_declined_sheet_defaults_institution(self, momo_grid) -> None:
        """Without an institution cell the winning variant's name is reported."""
        summary, _ = extract_grid_document({"Tổng hợp": [["Tổng hợp"]], "data": momo_grid}, "momo.xlsx")
        assert summary.institution == "Ví Momo"

    def test_no_variant(self) -> None:
        """Unclaimed documents report every sheet as missing a header."""
        (result,) = extract_grid_document({"Sheet1": [["Ngân hàng LPBank"], ["Ghi chú"]]}, "x.xlsx")
        assert result.error == "no header found"
        assert result.variant is None
        assert not result.included
        assert result.institution is None

    def test_header_without_codes(self) -> None:
        """A header with no coded rows is errored but keeps its variant."""
        grid = [["Người thu:", "Ngân hàng BIDV"], ["Mã KH", "Số tiền"], ["", 100]]
        (result,) = extract_grid_document({"S": grid}, "x.xlsx", variants=[BidvVariant()])
        assert result.error == "no codes found"
        assert result.variant == "bidv"
        assert result.codes == ()

    def test_header_only_sheet_keeps_metadata(self) -> None:
        """A header with no data rows is errored but still reports metadata."""
        grid = [["Người thu:", "Ngân hàng BIDV"], ["Ngày thu:", 45444], ["Mã KH", "Số tiền"]]
        (result,) = extract_grid_document({"S": grid}, "x.xlsx", variants=[BidvVariant()])
        assert result.error == "no codes found"
        assert not result.included
        assert result.institution == "Ngân hàng BIDV"
        assert result.statement_date == "01/06/2024"

    def test_repeated_code_kept_per_row(self) -> None:
        """A code paid three times yields three records."""
        grid = [
            ["Người thu:", "Ngân hàng BIDV"],
            ["Mã KH", "Số tiền"],
            ["X000001", 1000],
            ["X000001", 2000],
            ["x000001", 3000],
        ]
        (result,) = extract_grid_document({"S": grid}, "x.xlsx", variants=[BidvVariant()])
        assert result.codes == ("X000001", "X000001", "X000001")
        assert [(r.amount, r.row) for r in result.records] == [(1000, 2), (2000, 3), (3000, 4)]

    def test_lpbank_statement_with_booking_columns(self) -> None:
        """A branded LPBank statement with Diễn giải and Credit columns stays with LPBank."""
        grid = [
            ["LIENVIETPOSTBANK"],
            ["Ngày giao dịch", "Nội dung giao dịch (Details)", "Diễn giải", "Ghi có (Credit)"],
            ["01/06/2024", "X121212 TT TIEN NUOC", "", "50,000"],
        ]
        (result,) = extract_grid_document({"S": grid}, "lp.xlsx")
        assert result.variant == "lpbank"
        assert result.codes == ("X121212",)
        assert result.records[0].description == "X121212 TT TIEN NUOC"
        assert result.records[0].amount == 50000

    def test_metadata_disabled(self, bidv_grid) -> None:
        """Without metadata extraction no institution is filled in."""
        (result,) = extract_grid_document({"DS": bidv_grid}, "june.xlsx", extract_metadata=False)
        assert result.institution is None
        assert result.statement_date is None
        assert len(result.codes) == 3


class TestExtractTextDocument:
    """Tests for extract_text_document()."""

    def test_whole_document_result(self, bidv_pdf_text) -> None:
        """Text documents give one result labelled as the full file."""
        result = extract_text_document(bidv_pdf_text, "bidv.pdf")
        assert result.sheet_name == "Toàn bộ file"
        assert result.kind == "pdf"
        assert result.variant == "bidv"
        assert result.codes == ("X029302", "X029302")
        assert result.institution == "Ngân hàng BIDV"

    def test_no_codes(self) -> None:
        """Text without coded blocks is errored."""
        result = extract_text_document("REM Tfr phi SOTIEN: 5000", "fee.pdf", extract_metadata=False)
        assert result.error == "no codes found"
        assert not result.included
        assert result.institution is None


# =============================================================================
# Documents and batches
# =============================================================================


class TestExtractDocument:
    """Tests for extract_document()."""

    def test_dispatch_by_extension(self, fake_readers) -> None:
        """Spreadsheets and PDFs go to their readers."""
        assert extract_document("june.xlsx")[0].variant == "bidv"
        assert extract_document("bidv.pdf")[0].kind == "pdf"
        assert [name for name, _ in fake_readers] == ["june.xlsx", "bidv.pdf"]

    def test_unreadable(self, fake_readers) -> None:
        """Reader failures become a single error result."""
        (result,) = extract_document("broken.xlsx")
        assert result.sheet_name == "error"
        assert result.error == "document unreadable"
        assert not result.included

    def test_unsupported(self, fake_readers) -> None:
        """Unknown extensions are reported without calling a reader."""
        (result,) = extract_document("notes.docx")
        assert result.sheet_name == "error"
        assert fake_readers == []

    def test_password_propagates(self, fake_readers) -> None:
        """A locked PDF asks the caller for a password."""
        with pytest.raises(PasswordRequiredError):
            extract_document("locked.pdf")


class TestExtractBatch:
    """Tests for extract_batch()."""

    def test_password_retry(self, fake_readers) -> None:
        """The provider is asked again after a wrong password."""
        answers = iter(["wrong", "secret"])
        asked: list[str] = []

        def provider(path: Path) -> str | None:
            asked.append(path.name)
            return next(answers)

        results = extract_batch(["locked.pdf", "june.xlsx"], password_provider=provider)
        assert asked == ["locked.pdf", "locked.pdf"]
        assert fake_readers[:3] == [("locked.pdf", None), ("locked.pdf", "wrong"), ("locked.pdf", "secret")]
        assert [r.file_name for r in results] == ["locked.pdf", "june.xlsx"]

    def test_cancel_skips_document(self, fake_readers) -> None:
        """A cancelled prompt skips the PDF and the batch continues."""
        results = extract_batch(["locked.pdf", "june.xlsx"], password_provider=lambda _path: None)
        assert [r.file_name for r in results] == ["june.xlsx"]

    def test_no_provider(self, fake_readers) -> None:
        """Without a provider locked documents are skipped."""
        results = extract_batch(["locked.pdf", "bidv.pdf"])
        assert [r.file_name for r in results] == ["bidv.pdf"]

    def test_errors_do_not_stop_batch(self, fake_readers) -> None:
        """An unreadable file still lets later files run."""
        results = extract_batch(["broken.xlsx", "june.xlsx"])
        assert [r.sheet_name for r in results] == ["error", "DS"]

    def test_corrupt_xls_does_not_stop_batch(self, tmp_path) -> None:
        """A corrupt legacy workbook is recorded and the next file is read."""
        broken = tmp_path / "broken.xls"
        broken.write_bytes(b"garbage bytes, no BOF record")
        codes = tmp_path / "codes.csv"
        codes.write_text("Mã KH,Số tiền\nX000001,1000\n", encoding="utf-8")

        results = extract_batch([broken, codes])
        assert [(r.file_name, r.sheet_name) for r in results] == [("broken.xls", "error"), ("codes.csv", "codes")]
        assert results[0].error == "document unreadable"
        assert results[1].codes == ("X000001",)


# =============================================================================
# Aggregation
# =============================================================================


def _result(sheet_id: str, codes: tuple[str, ...], **kwargs) -> SheetResult:
    records = tuple(CodeRecord(code=c, amount=i, row=i) for i, c in enumerate(codes))
    return SheetResult(id=sheet_id, file_name="f.xlsx", sheet_name=sheet_id, codes=codes, records=records, **kwargs)


class TestAggregation:
    """Tests for the aggregation helpers."""

    @pytest.fixture
    def results(self) -> list[SheetResult]:
        return [
            _result("a", ("X000001", "X000002"), institution="Ngân hàng BIDV"),
            _result("b", ("X000003",), error="no codes found", included=False),
            _result("c", ("X000001",), statement_date="01/06/2024", included=False),
            _result("d", ("X000004",), statement_date="02/06/2024"),
        ]

    def test_selected(self, results) -> None:
        """Only included, error-free results are selected."""
        assert [r.id for r in selected_results(results)] == ["a", "d"]

    def test_include_ids(self, results) -> None:
        """Listed ids are selected even when errored or excluded."""
        assert [r.id for r in selected_results(results, ["b", "c"])] == ["a", "b", "c", "d"]

    def test_collect_codes(self, results) -> None:
        """Codes are newline-joined with duplicates kept."""
        assert collect_codes(results) == "X000001\nX000002\nX000004"
        assert collect_codes(results, ["c"]) == "X000001\nX000002\nX000001\nX000004"
        assert collect_codes([]) == ""

    def test_collect_records(self, results) -> None:
        """Records follow result order."""
        assert [r.code for r in collect_records(results)] == ["X000001", "X000002", "X000004"]

    def test_first_metadata(self, results) -> None:
        """Metadata comes from the first selected result that has any."""
        assert first_metadata(results) == ("Ngân hàng BIDV", None)
        assert first_metadata(results[3:]) == (None, "02/06/2024")
        assert first_metadata(results[1:3]) == (None, None)

    def test_enrichment_first_wins(self) -> None:
        """The first record seen for a code is kept."""
        records = [CodeRecord("X000001", 100), CodeRecord("X000002", 5), CodeRecord("X000001", 200)]
        index = build_enrichment_index(records)
        assert index["X000001"].amount == 100
        assert set(index) == {"X000001", "X000002"}
