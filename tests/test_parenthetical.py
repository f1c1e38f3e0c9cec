"""Tests for legalcite.parenthetical."""
from __future__ import annotations

from legalcite.parenthetical import (
    balanced_close,
    parse_parenthetical,
    scan_parentheticals,
    summarize_parentheticals,
)


class TestParseParenthetical:
    def test_court_and_year(self) -> None:
        info = parse_parenthetical("9th Cir. 2020")
        assert info.court == "9th Cir."
        assert info.year == 2020
        assert info.date is not None and info.date.iso == "2020"

    def test_court_and_full_date(self) -> None:
        info = parse_parenthetical("S.D.N.Y. Jan. 15, 2020")
        assert info.court == "S.D.N.Y."
        assert info.date is not None and info.date.iso == "2020-01-15"

    def test_year_only(self) -> None:
        info = parse_parenthetical("1973")
        assert info.court is None
        assert info.year == 1973

    def test_disposition_removed_from_court(self) -> None:
        info = parse_parenthetical("9th Cir. 2020, en banc")
        assert info.court == "9th Cir."
        assert info.disposition == "en banc"

    def test_disposition_first_wins(self) -> None:
        assert parse_parenthetical("per curiam, en banc").disposition == "per curiam"

    def test_disposition_only(self) -> None:
        info = parse_parenthetical("en banc")
        assert info.court is None
        assert info.year is None
        assert info.disposition == "en banc"


class TestBalancedClose:
    def test_nested(self) -> None:
        assert balanced_close("(a(b)c)", 0, 100) == 6

    def test_unbalanced(self) -> None:
        assert balanced_close("(a(b", 0, 100) is None

    def test_limit(self) -> None:
        assert balanced_close("(abc)", 0, 3) is None


class TestScanParentheticals:
    TEXT = (
        "500 F.2d 123 (9th Cir. 2020) (en banc) (holding that X), "
        "aff'd, 510 U.S. 1 (2021). Next sentence."
    )

    def test_chained_parentheticals_and_history(self) -> None:
        scan = scan_parentheticals(self.TEXT, len("500 F.2d 123"))
        assert [p.content for p in scan.parentheticals] == [
            "9th Cir. 2020",
            "en banc",
            "holding that X",
        ]
        assert scan.subsequent_history == "aff'd"
        assert self.TEXT[: scan.end].endswith("(2021)")

    def test_summary(self) -> None:
        scan = scan_parentheticals(self.TEXT, len("500 F.2d 123"))
        summary = summarize_parentheticals(scan.parentheticals)
        assert summary.info.court == "9th Cir."
        assert summary.info.year == 2020
        assert summary.info.disposition == "en banc"
        assert summary.explanatory == "holding that X"

    def test_disposition_before_court(self) -> None:
        text = "500 F.2d 123 (en banc) (9th Cir. 2020) (holding that X)"
        scan = scan_parentheticals(text, len("500 F.2d 123"))
        summary = summarize_parentheticals(scan.parentheticals)
        assert summary.info.court == "9th Cir."
        assert summary.info.year == 2020
        assert summary.info.disposition == "en banc"
        assert summary.explanatory == "holding that X"

    def test_semicolon_stops_scan(self) -> None:
        text = "500 F.2d 123 (1990); aff'd, 1 U.S. 2 (1991)"
        scan = scan_parentheticals(text, len("500 F.2d 123"))
        assert scan.subsequent_history is None
        assert text[: scan.end].endswith("(1990)")

    def test_window_bounds_scan(self) -> None:
        scan = scan_parentheticals("x (abcdefgh)", 1, window=5)
        assert scan.parentheticals == ()
        assert scan.end == 1

    def test_no_parenthetical(self) -> None:
        scan = scan_parentheticals("500 F.2d 123, and more", 12)
        assert scan.parentheticals == ()
        assert scan.end == 12

    def test_explanatory_first_paren_not_court(self) -> None:
        scan = scan_parentheticals(" (holding that the statute applies to all claims)", 0)
        summary = summarize_parentheticals(scan.parentheticals)
        assert summary.info.court is None
        assert summary.explanatory == "holding that the statute applies to all claims"
