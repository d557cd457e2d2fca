"""SAM.gov federal opportunities connector."""

from .connector import SamGovConnector

__all__ = ["SamGovConnector"]
