import datetime
import math
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class InventoryRecord(BaseModel):
    """
    One observation of one product on one day, as read from the input table.
    Records are immutable once ingestion has built them.
    """

    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    date: datetime.date
    inventory_level: float
    orders: float
    lead_time_days: float

    class Config:
        frozen = True


class ProductSummary(BaseModel):
    """Aggregate statistics for one product over all of its records."""

    product_id: str
    product_name: str
    avg_inventory: int
    avg_orders: float
    avg_lead_time: float
    data_points: int = Field(..., ge=1)

    class Config:
        frozen = True


class ThresholdParams(BaseModel):
    """
    User-supplied settings for one threshold calculation.

    Building the model is the validation step: the engine trusts whatever it
    receives. Leave `average_daily_sales` as None to compute it from each
    product's orders. `custom_lead_time` only matters (and is only checked)
    when `use_product_lead_time` is False.
    """

    safety_stock_percentage: float = Field(default=20, alias="safetyStockPercentage")
    average_daily_sales: Optional[float] = Field(
        default=None, alias="averageDailySales"
    )
    use_product_lead_time: bool = Field(default=True, alias="useProductLeadTime")
    custom_lead_time: Optional[float] = Field(default=7, alias="customLeadTime")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("safety_stock_percentage")
    @classmethod
    def check_safety_stock_percentage(cls, value: float) -> float:
        if not 0 <= value <= 100:
            raise ValueError("Safety stock must be between 0 and 100%")
        return value

    @field_validator("average_daily_sales")
    @classmethod
    def check_average_daily_sales(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not (math.isfinite(value) and value >= 0):
            raise ValueError("Average daily sales must be a positive number")
        return value

    @field_validator("custom_lead_time", mode="before")
    @classmethod
    def blank_lead_time_is_none(cls, value: Any) -> Any:
        # Form inputs send "" for an untouched number field
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def check_custom_lead_time(self) -> "ThresholdParams":
        if not self.use_product_lead_time and not (
            self.custom_lead_time is not None
            and math.isfinite(self.custom_lead_time)
            and self.custom_lead_time > 0
        ):
            raise ValueError("Lead time must be greater than 0")
        return self


class ThresholdLevels(BaseModel):
    """Reorder trigger levels for one product from one calculation run."""

    product_id: str
    product_name: str
    low: int
    medium: int
    high: int
    lead_time_used: float
    avg_daily_sales: float

    class Config:
        frozen = True


class StockFlowPoint(BaseModel):
    """One day of a product's stock movement, ready for charting."""

    date: datetime.date
    inventory_level: float
    orders: float
    inventory_change: float
    restock_amount: float
    days_of_supply: Optional[int] = None

    class Config:
        frozen = True


class InventoryInsight(BaseModel):
    product_id: str
    product_name: str
    current_level: float
    avg_orders: float
    days_of_supply: Optional[int] = None
    status: str

    class Config:
        frozen = True
