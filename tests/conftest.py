from unittest.mock import MagicMock

import httpx
import pytest

from sf_resultset.result import Result
from .unit_test_models import account_record


@pytest.fixture
def mock_query_response():
    """A single, complete page of query results"""
    return {
        "done": True,
        "totalSize": 2,
        "records": [
            account_record("001XX000003DGTYAA4", "Test Account 1", Industry="Technology"),
            account_record("001XX000003DGTZBZ4", "Test Account 2", Industry="Healthcare"),
        ],
    }


@pytest.fixture
def mock_query_response_with_next():
    """The first of two pages of query results"""
    return {
        "done": False,
        "totalSize": 4,
        "nextRecordsUrl": "/services/data/v63.0/query/01gRO0000016PIAYA2-2",
        "records": [
            account_record("001XX000003DGTYAA4", "Test Account 1"),
            account_record("001XX000003DGTZBZ4", "Test Account 2"),
        ],
    }


@pytest.fixture
def mock_query_response_next_page():
    """The second (last) page of query results"""
    return {
        "done": True,
        "totalSize": 4,
        "records": [
            account_record("001XX000003DGU0AAM", "Test Account 3"),
            account_record("001XX000003DGU1AAM", "Test Account 4"),
        ],
    }


@pytest.fixture
def more_results(mock_query_response_next_page):
    """A call-counting continuation callback returning the second page"""
    callback = MagicMock(
        side_effect=lambda url, sobject_type: Result(
            mock_query_response_next_page, {}, None, sobject_type
        )
    )
    return callback


@pytest.fixture()
def mock_sf_client():
    # stand-in for an authenticated httpx client pointed at an org
    mock_client = MagicMock(spec=httpx.Client)
    yield mock_client
