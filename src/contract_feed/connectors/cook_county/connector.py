"""Cook County contracts connector (source tag 'il')."""

from contract_feed.connectors.socrata import SocrataConnector
from contract_feed.normalization.mappings import COOK_COUNTY

from . import constants


class CookCountyConnector(SocrataConnector):
    """Cook County awarded contracts, most recent award first. No date window."""

    source_id = "il"
    mapping = COOK_COUNTY

    RESOURCE_URL = constants.RESOURCE_URL
    ORDER = constants.ORDER
    RESULT_LIMIT = constants.RESULT_LIMIT
