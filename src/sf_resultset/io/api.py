from collections.abc import Mapping
from typing import Any

from httpx import Client

from ..logger import getLogger
from ..data.sobject import SObject
from ..result import MoreResultsCallback, Result

_logger = getLogger("io")

DEFAULT_API_VERSION = "63.0"


def query_more(
    sf_client: Client,
    object_map: Mapping[str, type[SObject]] | None = None,
) -> MoreResultsCallback:
    """
    Build the callback a Result uses to follow `nextRecordsUrl`.

    The next page is requested through `sf_client`, which is expected to carry
    the instance base URL and authentication. Records on the next page that
    carry no mapped type are parsed as the previous page's SObject type.
    """

    def _more(next_records_url: str, sobject_type: type[SObject]) -> Result:
        return fetch_result(
            sf_client,
            next_records_url,
            object_map,
            default_type=sobject_type,
            more=_more,
        )

    return _more


def fetch_result(
    sf_client: Client,
    url: str,
    object_map: Mapping[str, type[SObject]] | None = None,
    params: Mapping[str, Any] | None = None,
    default_type: type[SObject] | None = None,
    more: MoreResultsCallback | None = None,
) -> Result:
    """
    GET a Salesforce API resource and wrap the response in a Result.

    Following pages are fetched with the same client and object map, unless a
    `more` callback is given.
    """
    _logger.debug("Fetching %s", url)
    response = sf_client.get(url, params=params)
    return Result.from_response(
        response,
        object_map,
        more or query_more(sf_client, object_map),
        default_type=default_type,
    )


def query(
    sf_client: Client,
    soql: str,
    object_map: Mapping[str, type[SObject]] | None = None,
    api_version: str | float = DEFAULT_API_VERSION,
) -> Result:
    """
    Run a SOQL query. The returned Result fetches further batches as it is iterated.
    https://developer.salesforce.com/docs/atlas.en-us.api_rest.meta/api_rest/dome_query.htm
    """
    return fetch_result(
        sf_client,
        f"/services/data/v{api_version}/query",
        object_map,
        params={"q": soql},
    )
