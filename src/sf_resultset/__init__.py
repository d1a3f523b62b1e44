from .result import Result, MoreResultsCallback
from .data.sobject import SObject, object_map
from .exceptions import (
    SalesforceError,
    UsageError,
    UsageErrorCode,
    ResultError,
    ResultErrorCode,
)
from .io import fetch_result, query, query_more

__all__ = [
    "Result",
    "MoreResultsCallback",
    "SObject",
    "object_map",
    "SalesforceError",
    "UsageError",
    "UsageErrorCode",
    "ResultError",
    "ResultErrorCode",
    "fetch_result",
    "query",
    "query_more",
]
