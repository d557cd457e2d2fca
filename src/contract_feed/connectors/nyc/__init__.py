"""NYC City Record connector."""

from .connector import NycCityRecordConnector

__all__ = ["NycCityRecordConnector"]
