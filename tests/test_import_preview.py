"""
Tests aperçu d'import
  build_import_preview(headers, rows, required) → ImportPreview
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lp_studio.stores import build_import_preview, is_truthy_flag

REQUIRED = ["店舗ID", "店舗名", "郵便番号", "住所", "都道府県"]
HEADERS = REQUIRED + ["駐車場", "24時間"]


def row(store_id, name="本店", parking="○", open24=""):
    return {
        "店舗ID": store_id, "店舗名": name, "郵便番号": "100-0001", "住所": "千代田",
        "都道府県": "東京都", "駐車場": parking, "24時間": open24,
    }


# ── En-têtes ──────────────────────────────────────────────────────────────

class TestHeaders:
    def test_valid(self):
        preview = build_import_preview(HEADERS, [row("1")], REQUIRED)
        assert preview.summary.header_order_valid is True
        assert preview.summary.missing_required_headers == []
        assert preview.summary.valid_rows == 1

    def test_missing_header_invalidates_all_rows(self):
        headers = [h for h in HEADERS if h != "住所"]
        preview = build_import_preview(headers, [row("1"), row("2")], REQUIRED)
        assert preview.summary.missing_required_headers == ["住所"]
        assert preview.summary.header_order_valid is False
        assert preview.summary.invalid_rows == 2
        assert preview.summary.valid_rows == 0
        assert preview.invalid_row_indices == []

    def test_wrong_order(self):
        headers = ["店舗名", "店舗ID"] + HEADERS[2:]
        preview = build_import_preview(headers, [row("1")], REQUIRED)
        assert preview.summary.missing_required_headers == []
        assert preview.summary.header_order_valid is False
        assert preview.summary.invalid_rows == 1


# ── Lignes ────────────────────────────────────────────────────────────────

class TestRows:
    def test_blank_required_cell(self):
        rows = [row("1"), row("2", name="  "), row("")]
        preview = build_import_preview(HEADERS, rows, REQUIRED)
        assert preview.summary.total_rows == 3
        assert preview.summary.valid_rows == 1
        assert preview.summary.invalid_rows == 2
        assert preview.invalid_row_indices == [1, 2]

    def test_duplicates(self):
        rows = [row("1", name="A"), row("2"), row("1", name="B"), row("1", name="C")]
        preview = build_import_preview(HEADERS, rows, REQUIRED)
        assert preview.summary.duplicate_id_count == 1
        assert preview.summary.duplicate_row_count == 3
        dup = preview.duplicates[0]
        assert dup.store_id == "1"
        assert dup.sample_name == "A"
        assert dup.sample_address == "千代田"
        assert len(dup.rows) == 3

    def test_blank_ids_not_grouped(self):
        preview = build_import_preview(HEADERS, [row(""), row("")], REQUIRED)
        assert preview.duplicates == []

    def test_label_stats(self):
        rows = [row("1", parking="○", open24="対象"), row("2", parking="×"), row("3", parking="Yes")]
        stats = {s.column: s for s in build_import_preview(HEADERS, rows, REQUIRED).label_stats}
        assert list(stats) == ["駐車場", "24時間"]
        assert stats["駐車場"].truthy_count == 2
        assert stats["駐車場"].falsey_count == 1
        assert stats["24時間"].truthy_count == 1
        assert stats["24時間"].total_count == 3

    def test_custom_truthy(self):
        rows = [row("1", parking="x")]
        stats = build_import_preview(HEADERS, rows, REQUIRED, is_truthy=lambda v: v == "x").label_stats
        assert stats[0].truthy_count == 1


# ── Aperçu ────────────────────────────────────────────────────────────────

class TestPreview:
    def test_preview_size(self):
        rows = [row(str(i)) for i in range(20)]
        preview = build_import_preview(HEADERS, rows, REQUIRED, preview_size=5)
        assert len(preview.preview_rows) == 5
        assert preview.preview_rows[0][0] == "0"

    def test_preview_headers(self):
        preview = build_import_preview(HEADERS, [row("9")], REQUIRED, preview_headers=["店舗名", "店舗ID"])
        assert preview.preview_headers == ["店舗名", "店舗ID"]
        assert preview.preview_rows == [["本店", "9"]]

    def test_negative_size(self):
        assert build_import_preview(HEADERS, [row("1")], REQUIRED, preview_size=-1).preview_rows == []

    def test_empty_input(self):
        preview = build_import_preview([], [], REQUIRED)
        assert preview.summary.total_rows == 0
        assert preview.summary.invalid_rows == 0
        assert preview.summary.missing_required_headers == REQUIRED
        assert preview.label_stats == []

    def test_json_shape(self):
        data = build_import_preview(HEADERS, [row("1")], REQUIRED).to_json_dict()
        assert set(data["summary"]) >= {"totalRows", "validRows", "invalidRows", "headerOrderValid"}
        assert "labelStats" in data and "previewRows" in data


class TestTruthy:
    def test_tokens(self):
        for value in ("○", "〇", "対象", "はい", "YES", " y ", "TRUE", "1", "On", "１"):
            assert is_truthy_flag(value), value

    def test_falsey(self):
        for value in ("", "  ", "×", "no", "0", "false", "対象外"):
            assert not is_truthy_flag(value), value
