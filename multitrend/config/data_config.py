#!filepath: multitrend/config/data_config.py
from pydantic import BaseModel


class ColumnConfig(BaseModel):
    """Header names of the long-form source table."""
    date: str = "Date"
    entity: str = "Symbol"
    open: str = "Open"
    close: str = "Close"


class DataConfig(BaseModel):
    columns: ColumnConfig = ColumnConfig()
    encoding: str = "utf-8"
