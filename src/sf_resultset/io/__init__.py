from .api import fetch_result, query, query_more

__all__ = [
    "fetch_result",
    "query",
    "query_more",
]
