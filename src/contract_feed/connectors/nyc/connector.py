"""NYC City Record connector (source tag 'ny')."""

from typing import Optional

from contract_feed.connectors.socrata import SocrataConnector
from contract_feed.normalization.mappings import NEW_YORK

from . import constants


class NycCityRecordConnector(SocrataConnector):
    """New York City procurement notices, newest registrations first, windowed on registration date."""

    source_id = "ny"
    mapping = NEW_YORK

    RESOURCE_URL = constants.RESOURCE_URL
    ORDER = constants.ORDER
    RESULT_LIMIT = constants.RESULT_LIMIT
    DATE_FIELD = constants.DATE_FIELD

    def lookback_days(self) -> Optional[int]:
        return self._settings.ny_lookback_days
