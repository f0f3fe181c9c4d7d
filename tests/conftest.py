"""Pytest configuration for statement_recon tests.

Fixtures build in-memory cell grids shaped like the statements each layout
variant handles, so no real spreadsheets or PDFs are needed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

Grid = list[list[Any]]


@pytest.fixture
def vietin_grid() -> Grid:
    """VietinBank statement: branded title, period row, description-embedded codes."""
    return [
        ["NGÂN HÀNG TMCP CÔNG THƯƠNG VIỆT NAM"],
        ["Chu kỳ yêu cầu:", "2024-06-01 - 2024-06-30"],
        [],
        ["STT", "Ngày giao dịch", "Mô tả giao dịch", "Có / Credit", "Tên tài khoản đối ứng"],
        [1, "01/06/2024", "TTHD Tien nuoc Ma KH-X139595 Ky 6/2024", "1,250,000", "NGUYEN VAN A"],
        [2, "02/06/2024", "Chuyen tien noi bo", "500,000", "TRAN B"],
        [3, "03/06/2024", "X052373", 320000, "LE C"],
    ]


@pytest.fixture
def bidv_grid() -> Grid:
    """BIDV collection list: institution row supplies the brand evidence."""
    return [
        ["DANH SÁCH THU HỘ TIỀN NƯỚC"],
        ["Người thu:", "Ngân hàng BIDV"],
        ["Ngày thu:", 45444],
        ["STT", "Mã KH", "Tên khách hàng", "Số tiền", "Nội dung"],
        [1, "X000001", "Nguyen A", 150000, "Thanh toan tien nuoc"],
        [2, "x000002", "Tran B", "200,000", "TT nuoc T6"],
        [3, "X000001", "Nguyen A", 150000, "Thanh toan lan 2"],
    ]


@pytest.fixture
def agribank_grid() -> Grid:
    """Unbranded collection list with metadata columns read vertically."""
    return [
        ["CÔNG TY CẤP NƯỚC"],
        ["Người thu", "Ngày thu", "Mã KH", "Số tiền", "Nội dung"],
        ["Ngân hàng Agribank CN Hà Tĩnh", datetime(2024, 6, 3), "X111111", "75,000", "X111111,NGUYEN VAN A#T6/2024#ref"],
        ["Ngân hàng Agribank CN Hà Tĩnh", datetime(2024, 6, 3), "X222222", "abc", "Tien nuoc"],
    ]


@pytest.fixture
def sacombank_grid() -> Grid:
    """Sacombank statement with bilingual headers and credit/debit columns."""
    return [
        ["SACOMBANK - SAO KÊ TÀI KHOẢN"],
        ["Ngày giao dịch / Booking date", "Diễn giải / Description", "Số tiền rút / Debit", "Số tiền gửi / Credit"],
        ["05/06/2024 10:15:00", "TT tien nuoc X100200 Nguyen A", "-", "120,000"],
        ["06/06/2024 09:00:00", "Phi dich vu", "5,000", "-"],
        ["07/06/2024 11:00:00", "x300400 thanh toan", "", "80000"],
    ]


@pytest.fixture
def vietcombank_grid() -> Grid:
    """Vietcombank statement with GENPCO_ narratives."""
    return [
        ["NGÂN HÀNG TMCP NGOẠI THƯƠNG VIỆT NAM"],
        ["Ngày", "Mô tả", "Số tiền"],
        ["01/06/2024", "MBVCB.123.X456789.GENPCO_TT tien nuoc thang 6", "90,000"],
        ["02/06/2024", "Nop tien mat", "10,000"],
    ]


@pytest.fixture
def lpbank_grid() -> Grid:
    """LPBank statement with a statement-period line and payer names."""
    return [
        ["LIENVIETPOSTBANK"],
        ["Kỳ sao kê: 01/06/2024 - 30/06/2024"],
        ["Ngày", "Nội dung giao dịch (Details)", "Ghi có (Credit)", "Họ tên"],
        ["01/06/2024", "X121212 TT TIEN NUOC", "50,000", "Pham D"],
        ["02/06/2024", "THANH TOAN HOA DON X343434 KY 6/2024", "60,000", None],
    ]


@pytest.fixture
def momo_grid() -> Grid:
    """MoMo export data sheet with free-form partner codes."""
    return [
        ["MS.Mã đối tác", "MS.Tên khách hàng", "MS.Nợ"],
        ["PE123", "Nguyen E", "45,000"],
        ["x998877", "Tran F", 30000],
        [None, "Blank", 10],
    ]


@pytest.fixture
def vnpt_grid() -> Grid:
    """VNPT wallet export."""
    return [
        ["Mã khách hàng", "Tên khách hàng", "Giá trị hóa đơn"],
        ["KH001", "Le G", "12,345.6"],
    ]


@pytest.fixture
def payoo_grid() -> Grid:
    """Payoo wallet export."""
    return [
        ["Mã khách hàng", "Họ tên", "Số tiền(VND)"],
        ["X555666", "Vo H", "99,000"],
    ]


@pytest.fixture
def bidv_pdf_text() -> str:
    """BIDV transfer text with two coded blocks for the same customer and one fee block."""
    return (
        "Sao ke BIDV\n"
        "REM Tfr Ac:7010519754 O@L_193001 _x029302_KH:PHAN XUAN QUI, SODB:X029302 "
        "TT TIEN NUOC THANG:1 - NAM:2026, SOTIEN: 62,860 42 26/01/2026\n"
        "REM Tfr Ac:111 phi dich vu SOTIEN: 5000\n"
        "REM Tfr Ac:222 KH:LE VAN B, SODB:X029302 TT TIEN NUOC THANG:2 - NAM:2026, SOTIEN: 70000\n"
    )
