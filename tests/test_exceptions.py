import copy
import pickle

import pytest

from sf_resultset.exceptions import (
    ResultError,
    ResultErrorCode,
    SalesforceError,
    UsageError,
    UsageErrorCode,
)
from .unit_test_models import Account


def test_usage_and_result_errors_are_separate():
    assert issubclass(UsageError, SalesforceError)
    assert issubclass(ResultError, SalesforceError)
    assert not issubclass(UsageError, ResultError)
    assert not issubclass(ResultError, UsageError)


@pytest.mark.parametrize(
    "error,expected_message",
    [
        (
            ResultError(ResultErrorCode.UNEXPECTED_STATUS_CODE, {"status": 503}),
            "Unexpected HTTP status code 503 from Salesforce",
        ),
        (
            ResultError(ResultErrorCode.UNPARSABLE_RESPONSE),
            "Unable to parse Salesforce response body",
        ),
        (
            ResultError(
                ResultErrorCode.UNPARSABLE_RECORD,
                {"record": {}, "fqcn": Account, "object": None},
            ),
            "Unable to parse record as Account",
        ),
        (
            UsageError(UsageErrorCode.BAD_SFO_CLASSNAME, {"fqcn": "NotAClass"}),
            "'NotAClass' is not an SObject class",
        ),
    ],
)
def test_error_messages(error, expected_message):
    assert error.message == expected_message
    assert str(error) == f"[{error.code.name}] {expected_message}"


def test_message_falls_back_to_template_without_context():
    error = ResultError(ResultErrorCode.UNEXPECTED_STATUS_CODE)

    assert error.message == ResultErrorCode.UNEXPECTED_STATUS_CODE.value
    assert error.status_code is None


def test_wrapped_cause():
    with pytest.raises(ResultError) as excinfo:
        try:
            raise ValueError("bad json")
        except ValueError as e:
            raise ResultError(ResultErrorCode.UNPARSABLE_RESPONSE) from e

    error = excinfo.value
    assert isinstance(error.cause, ValueError)
    assert "bad json" in str(error)


def test_record_context():
    record = {"Id": "001XX000003DGTYAA4"}
    error = ResultError(
        ResultErrorCode.UNPARSABLE_RECORD,
        {"record": record, "fqcn": Account, "object": None},
    )

    assert error.record is record
    assert error.context["fqcn"] is Account


def test_exception_repr():
    error = UsageError(UsageErrorCode.BAD_SFO_CLASSNAME, {"fqcn": dict})

    assert error.__class__.__name__ in repr(error)
    assert str(error) in repr(error)


@pytest.mark.parametrize(
    "error",
    [
        ResultError(ResultErrorCode.UNEXPECTED_STATUS_CODE, {"status": 500}),
        ResultError(ResultErrorCode.UNPARSABLE_RESPONSE),
        UsageError(UsageErrorCode.BAD_SFO_CLASSNAME, {"fqcn": dict}),
    ],
)
def test_error_survives_pickle_and_copy(error):
    for duplicate in (pickle.loads(pickle.dumps(error)), copy.copy(error)):
        assert type(duplicate) is type(error)
        assert duplicate.code is error.code
        assert duplicate.context == error.context
        assert str(duplicate) == str(error)
