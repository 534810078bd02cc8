import datetime

import pytest

from reorder_thresholds.schemas import InventoryRecord, ThresholdParams


def make_record(product_id, day, inventory_level, orders, lead_time_days, product_name=None):
    """Builds an InventoryRecord for 2024-01-<day>."""
    return InventoryRecord(
        product_id=product_id,
        product_name=product_name or f"Product {product_id}",
        date=datetime.date(2024, 1, day),
        inventory_level=inventory_level,
        orders=orders,
        lead_time_days=lead_time_days,
    )


@pytest.fixture
def sample_csv():
    """Unsorted input covering two products, with columns in a non-standard order."""
    return (
        "date,product_id,product_name,orders,inventory_level,lead_time_days\n"
        "2024-01-03,P2,Gadget,4,40,3\n"
        "2024-01-03,P1,Widget,8,80,7\n"
        "2024-01-01,P1,Widget,10,100,5\n"
        "2024-01-02,P1,Widget,12,90,5\n"
        "2024-01-01,P2,Gadget,6,50,2\n"
    )


@pytest.fixture
def widget_records():
    """Three days of one product: average sales 10, average lead time 5.67."""
    return [
        make_record("P1", 1, 100, 10, 5, "Widget"),
        make_record("P1", 2, 90, 12, 5, "Widget"),
        make_record("P1", 3, 80, 8, 7, "Widget"),
    ]


@pytest.fixture
def mixed_records(widget_records):
    # P3 appears before P2 on purpose: grouping follows first appearance.
    return widget_records + [
        make_record("P3", 1, 30, 2, 10, "Sprocket"),
        make_record("P2", 1, 50, 6, 2, "Gadget"),
        make_record("P2", 3, 40, 4, 3, "Gadget"),
    ]


@pytest.fixture
def default_params():
    return ThresholdParams(safety_stock_percentage=20, use_product_lead_time=True)
