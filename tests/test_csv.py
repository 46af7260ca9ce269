"""
Tests import CSV de magasins
  parse_csv → CsvParseResult ; build_store_table → StoreTable ; couleurs de labels
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lp_studio.stores import build_store_table, parse_csv
from lp_studio.stores.csv_parser import decode_csv_bytes, rows_to_records
from lp_studio.stores.label_colors import (
    DEFAULT_LABEL_COLORS, RANDOM_LABEL_PALETTE, label_color, unique_label_colors,
)
from lp_studio.stores.table import store_label_defaults

HEADERS = ["店舗ID", "店舗名", "郵便番号", "住所", "都道府県", "駐車場", "24時間"]


# ── parse_csv ─────────────────────────────────────────────────────────────

class TestParseCsv:
    def test_basic(self):
        result = parse_csv("a,b\n1,2\n3,4\n")
        assert result.headers == ["a", "b"]
        assert result.rows == [["1", "2"], ["3", "4"]]

    def test_bom_and_crlf(self):
        result = parse_csv("\ufeffa,b\r\n1,2\r\n")
        assert result.headers == ["a", "b"]
        assert result.rows == [["1", "2"]]

    def test_quoted_cells(self):
        result = parse_csv('name,addr\n"本店","東京都, 千代田区"\n"say ""hi""",x\n')
        assert result.rows == [["本店", "東京都, 千代田区"], ['say "hi"', "x"]]

    def test_quoted_newline(self):
        result = parse_csv('a,b\n"line1\nline2",2\n')
        assert result.rows == [["line1\nline2", "2"]]

    def test_blank_lines_skipped_and_cells_trimmed(self):
        result = parse_csv("a , b\n\n  1 , 2  \n   \n")
        assert result.headers == ["a", "b"]
        assert result.rows == [["1", "2"]]

    def test_empty(self):
        result = parse_csv("")
        assert result.headers == [] and result.rows == []

    def test_delimiter(self):
        assert parse_csv("a\tb\n1\t2", delimiter="\t").rows == [["1", "2"]]


class TestDecodeBytes:
    def test_utf8_bom(self):
        assert decode_csv_bytes("\ufeff店舗".encode("utf-8")) == "店舗"

    def test_shift_jis_fallback(self):
        assert decode_csv_bytes("店舗ID,店舗名".encode("cp932")) == "店舗ID,店舗名"


class TestRowsToRecords:
    def test_short_rows_padded(self):
        records = rows_to_records(["a", "b", "c"], [["1"], ["1", "2", "3"]])
        assert records == [{"a": "1", "b": "", "c": ""}, {"a": "1", "b": "2", "c": "3"}]


# ── build_store_table ─────────────────────────────────────────────────────

class TestStoreTable:
    def test_canonical_from_first_headers(self):
        headers = ["ID", "名前", "〒", "所在地", "県", "駐車場"]
        table = build_store_table(headers, [{"ID": "1", "駐車場": "○"}])
        assert table.canonical.as_list() == headers[:5]
        assert table.extra_columns == ["駐車場"]
        assert table.columns == headers

    def test_short_headers_keep_default_keys(self):
        table = build_store_table(["店舗ID", "店舗名"], [])
        assert table.canonical.store_id_key == "店舗ID"
        assert table.canonical.prefecture_key == "都道府県"
        assert table.extra_columns == []

    def test_unknown_row_keys_appended(self):
        table = build_store_table(HEADERS, [{"店舗ID": "1", "備考": "x"}])
        assert table.columns[-1] == "備考"

    def test_label_defaults(self):
        table = build_store_table(HEADERS, [])
        labels = store_label_defaults(table)
        assert list(labels) == ["駐車場", "24時間"]
        assert labels["駐車場"]["displayName"] == "駐車場"
        assert labels["駐車場"]["color"] != labels["24時間"]["color"]


# ── Couleurs ──────────────────────────────────────────────────────────────

class TestLabelColors:
    def test_stable(self):
        assert label_color("駐車場") == label_color("駐車場")
        assert label_color("駐車場") in DEFAULT_LABEL_COLORS

    def test_empty_key(self):
        assert label_color("") == DEFAULT_LABEL_COLORS[0]

    def test_case_and_width_insensitive(self):
        assert label_color("ＡＢＣ") == label_color("abc")
        assert label_color(" Parking ") == label_color("parking")

    def test_unique_within_palette(self):
        keys = [f"label{i}" for i in range(len(RANDOM_LABEL_PALETTE))]
        colors = unique_label_colors(keys)
        assert len(set(colors.values())) == len(keys)
        assert set(colors.values()) <= set(RANDOM_LABEL_PALETTE)

    def test_overflow_falls_back(self):
        keys = [f"label{i}" for i in range(len(RANDOM_LABEL_PALETTE) + 1)]
        colors = unique_label_colors(keys)
        assert colors[keys[-1]] in DEFAULT_LABEL_COLORS

    def test_deterministic(self):
        assert unique_label_colors(["a", "b"]) == unique_label_colors(["a", "b"])
