"""
Error taxonomy for result materialization.

Two independent families:

* ``UsageError`` - the caller handed us something we cannot work with
  (e.g. an object map entry that is not an SObject class). Raised eagerly.
* ``ResultError`` - the API returned data we cannot turn into objects.
  Raised when the response is classified, or lazily while records are parsed.
"""

from enum import Enum
from typing import Any


class UsageErrorCode(Enum):
    BAD_SFO_CLASSNAME = "{fqcn!r} is not an SObject class"


class ResultErrorCode(Enum):
    UNEXPECTED_STATUS_CODE = "Unexpected HTTP status code {status} from Salesforce"
    UNPARSABLE_RESPONSE = "Unable to parse Salesforce response body"
    UNPARSABLE_RECORD = "Unable to parse record as {fqcn.__qualname__}"


class SalesforceError(Exception):
    code: Enum
    context: dict[str, Any]

    def __init__(self, code: Enum, context: dict[str, Any] | None = None):
        self.code = code
        self.context = context or {}
        # args must rebuild the error for pickle and copy
        super().__init__(code, self.context)

    @property
    def message(self) -> str:
        try:
            return self.code.value.format(**self.context)
        except (KeyError, AttributeError, IndexError):
            return self.code.value

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self):
        if self.cause is not None:
            return f"[{self.code.name}] {self.message}: {self.cause}"
        return f"[{self.code.name}] {self.message}"

    def __repr__(self):
        return f"{type(self).__name__}({str(self)!r})"


class UsageError(SalesforceError):
    code: UsageErrorCode

    def __init__(self, code: UsageErrorCode, context: dict[str, Any] | None = None):
        super().__init__(code, context)


class ResultError(SalesforceError):
    code: ResultErrorCode

    def __init__(self, code: ResultErrorCode, context: dict[str, Any] | None = None):
        super().__init__(code, context)

    @property
    def status_code(self) -> int | None:
        return self.context.get("status")

    @property
    def record(self) -> dict[str, Any] | None:
        return self.context.get("record")
