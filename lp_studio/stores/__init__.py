from .csv_parser import CsvParseResult, decode_csv_bytes, parse_csv, rows_to_records
from .import_preview import ImportPreview, build_import_preview, is_truthy_flag
from .label_colors import label_color, unique_label_colors
from .table import build_store_table, store_label_defaults
