class IngestionError(Exception):
    """Raised when raw inventory data cannot be turned into records."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class RecordValidationError(IngestionError):
    """
    Raised for the first data row that is missing required columns or holds
    values that cannot be coerced. `row` is 1-based over data rows.
    """
    def __init__(
        self,
        row: int,
        missing_columns: list[str] | None = None,
        invalid_columns: list[str] | None = None,
    ):
        self.row = row
        self.missing_columns = list(missing_columns or [])
        self.invalid_columns = list(invalid_columns or [])
        if self.missing_columns:
            message = (
                f"Row {row}: Missing required columns: {', '.join(self.missing_columns)}"
            )
        else:
            message = (
                f"Row {row}: Invalid values for columns: {', '.join(self.invalid_columns)}"
            )
        super().__init__(message)
