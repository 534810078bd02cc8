import datetime

import pandas as pd
import pytest

from reorder_thresholds.exceptions import IngestionError, RecordValidationError
from reorder_thresholds.ingestion import (
    parse_inventory_file,
    parse_inventory_table,
    summarize_products,
)

from .conftest import make_record

HEADER = "product_id,product_name,date,inventory_level,orders,lead_time_days\n"


def test_parse_sorts_by_product_then_date(sample_csv):
    records = parse_inventory_table(sample_csv)

    keys = [(r.product_id, r.date.isoformat()) for r in records]
    assert keys == [
        ("P1", "2024-01-01"),
        ("P1", "2024-01-02"),
        ("P1", "2024-01-03"),
        ("P2", "2024-01-01"),
        ("P2", "2024-01-03"),
    ]
    for a, b in zip(records, records[1:]):
        assert a.product_id < b.product_id or (
            a.product_id == b.product_id and a.date <= b.date
        )


def test_parse_coerces_types(sample_csv):
    first = parse_inventory_table(sample_csv)[0]

    assert first.product_id == "P1"
    assert first.product_name == "Widget"
    assert first.date == datetime.date(2024, 1, 1)
    assert first.inventory_level == 100.0
    assert first.orders == 10.0
    assert first.lead_time_days == 5.0


def test_parse_keeps_numeric_ids_as_text():
    records = parse_inventory_table(HEADER + "1001,Widget,2024-01-01,5,1,2\n")
    assert records[0].product_id == "1001"


def test_parse_ignores_extra_columns():
    raw = (
        "warehouse,product_id,product_name,date,inventory_level,orders,lead_time_days\n"
        "North,P1,Widget,2024-01-01,10,2,3\n"
    )
    records = parse_inventory_table(raw)
    assert len(records) == 1
    assert records[0].product_id == "P1"


def test_parse_accepts_other_date_formats():
    raw = HEADER + "P1,Widget,01/15/2024,10,2,3\nP1,Widget,2024-01-02,10,2,3\n"
    records = parse_inventory_table(raw)
    assert [r.date for r in records] == [
        datetime.date(2024, 1, 2),
        datetime.date(2024, 1, 15),
    ]


def test_parse_keeps_the_date_written_in_offset_timestamps():
    raw = HEADER + "P1,Widget,2024-01-05T20:00:00-05:00,10,2,3\n"
    records = parse_inventory_table(raw)
    assert records[0].date == datetime.date(2024, 1, 5)


def test_same_day_rows_are_ordered_by_instant():
    raw = HEADER + (
        "P1,Widget,2024-01-05T09:00:00+00:00,30,2,3\n"
        "P1,Widget,2024-01-05T08:00:00+05:00,10,2,3\n"
        "P1,Widget,2024-01-05T06:00:00+00:00,20,2,3\n"
    )
    records = parse_inventory_table(raw)
    assert [r.date for r in records] == [datetime.date(2024, 1, 5)] * 3
    assert [r.inventory_level for r in records] == [10.0, 20.0, 30.0]


def test_parse_empty_input_returns_empty_list():
    assert parse_inventory_table("") == []
    assert parse_inventory_table("  \n\n") == []


def test_parse_header_only_returns_empty_list():
    assert parse_inventory_table(HEADER) == []


def test_missing_cells_report_row_and_every_column():
    raw = HEADER + "P1,Widget,2024-01-01,10,2,3\nP1,Widget,2024-01-02,10,,\n"

    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(raw)

    error = excinfo.value
    assert error.row == 2
    assert error.missing_columns == ["orders", "lead_time_days"]
    assert str(error) == "Row 2: Missing required columns: orders, lead_time_days"


def test_whitespace_cell_counts_as_missing():
    raw = HEADER + "P1,   ,2024-01-01,10,2,3\n"

    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(raw)

    assert excinfo.value.missing_columns == ["product_name"]


def test_absent_header_column_fails_first_row():
    raw = "product_id,product_name,date,inventory_level,orders\nP1,Widget,2024-01-01,10,2\n"

    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(raw)

    assert excinfo.value.row == 1
    assert excinfo.value.missing_columns == ["lead_time_days"]


def test_header_names_are_case_sensitive():
    raw = HEADER.replace("orders", "Orders") + "P1,Widget,2024-01-01,10,2,3\n"

    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(raw)

    assert excinfo.value.missing_columns == ["orders"]


def test_first_invalid_row_aborts_whole_parse():
    raw = (
        HEADER
        + "P1,Widget,2024-01-01,10,2,3\n"
        + "P1,Widget,2024-01-02,ten,2,3\n"
        + "P2,,2024-01-02,10,2,3\n"
    )

    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(raw)

    assert excinfo.value.row == 2
    assert excinfo.value.invalid_columns == ["inventory_level"]
    assert excinfo.value.missing_columns == []
    assert str(excinfo.value) == "Row 2: Invalid values for columns: inventory_level"


def test_non_finite_numbers_are_rejected():
    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(HEADER + "P1,Widget,2024-01-01,inf,2,3\n")

    assert excinfo.value.invalid_columns == ["inventory_level"]


def test_unparseable_date_is_rejected():
    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(HEADER + "P1,Widget,not-a-date,10,2,3\n")

    assert excinfo.value.invalid_columns == ["date"]


def test_missing_columns_take_priority_over_invalid_values():
    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(HEADER + "P1,Widget,2024-01-01,abc,,3\n")

    assert excinfo.value.missing_columns == ["orders"]


def test_blank_lines_are_skipped_and_not_counted():
    raw = HEADER + "P1,Widget,2024-01-01,10,2,3\n\nP1,Widget,2024-01-02,10,x,3\n"

    with pytest.raises(RecordValidationError) as excinfo:
        parse_inventory_table(raw)

    assert excinfo.value.row == 2


def test_record_validation_error_is_an_ingestion_error():
    assert issubclass(RecordValidationError, IngestionError)


def test_malformed_table_raises_parser_error():
    raw = HEADER + "P1,Widget,2024-01-01,10,2,3\nP1,Widget,2024-01-02,10,2,3,9,9\n"

    with pytest.raises(pd.errors.ParserError):
        parse_inventory_table(raw)


def test_parse_file_handles_bom(tmp_path, sample_csv):
    path = tmp_path / "inventory.csv"
    path.write_bytes(sample_csv.encode("utf-8-sig"))

    records = parse_inventory_file(path)

    assert len(records) == 5
    assert records[0].product_id == "P1"


def test_parse_file_falls_back_to_latin1(tmp_path):
    path = tmp_path / "inventory.csv"
    path.write_bytes((HEADER + "P1,Café Blend,2024-01-01,10,2,3\n").encode("latin-1"))

    records = parse_inventory_file(path)

    assert records[0].product_name == "Café Blend"


def test_parse_empty_file_returns_empty_list(tmp_path):
    path = tmp_path / "inventory.csv"
    path.write_text("")

    assert parse_inventory_file(path) == []


def test_parse_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_inventory_file(tmp_path / "nope.csv")


def test_summarize_computes_rounded_averages(widget_records):
    [summary] = summarize_products(widget_records)

    assert summary.product_id == "P1"
    assert summary.product_name == "Widget"
    assert summary.avg_inventory == 90
    assert summary.avg_orders == 10.0
    assert summary.avg_lead_time == 5.7
    assert summary.data_points == 3


def test_summarize_rounds_halves_up():
    records = [make_record("P1", 1, 2, 1, 1), make_record("P1", 2, 3, 2, 2)]

    [summary] = summarize_products(records)

    assert summary.avg_inventory == 3
    assert summary.avg_orders == 1.5
    assert summary.avg_lead_time == 1.5


def test_summarize_keeps_first_appearance_order(mixed_records):
    summaries = summarize_products(mixed_records)

    assert [s.product_id for s in summaries] == ["P1", "P3", "P2"]
    assert [s.data_points for s in summaries] == [3, 1, 2]


def test_summarize_keeps_first_seen_name_for_conflicting_names():
    records = [
        make_record("P1", 1, 10, 1, 1, "Widget"),
        make_record("P1", 2, 10, 1, 1, "Widget v2"),
    ]

    [summary] = summarize_products(records)

    assert summary.product_name == "Widget"


def test_summarize_empty_records():
    assert summarize_products([]) == []
