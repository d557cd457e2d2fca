"""Cook County contracts connector."""

from .connector import CookCountyConnector

__all__ = ["CookCountyConnector"]
