import copy
from collections.abc import Callable, Iterator, Mapping
from typing import Any, ClassVar, Generic, TypeVar

import httpx
from more_itertools import first

from .logger import getLogger
from ._models import QueryResultJSON, RawRecord
from .data.sobject import SObject, _is_sobject_subclass
from .exceptions import (
    ResultError,
    ResultErrorCode,
    SalesforceError,
    UsageError,
    UsageErrorCode,
)

LOGGER = getLogger("result")

_SObject = TypeVar("_SObject", bound=SObject)

MoreResultsCallback = Callable[[str, type[SObject]], "Result | None"]
"""Fetches the page at a `nextRecordsUrl`, given the current page's SObject type."""


class Result(Generic[_SObject]):
    """
    A page of records returned by the Salesforce API, materialized lazily.

    Records are converted to SObject instances while the Result is iterated.
    Nested record lists become nested Results; nested single records become
    the SObject itself. When this page is exhausted, the next page (if any) is
    fetched through the `more` callback and iterated in turn.

    Objects are cached per page, but only once the whole page has been parsed
    successfully; an interrupted or failed pass leaves nothing behind.
    """

    DEFAULT_TYPE: ClassVar[type[SObject]] = SObject

    sobject_type: type[_SObject]
    "SObject class the records on this page are parsed as"
    results: QueryResultJSON
    "The normalized response body"
    object_map: Mapping[str, type[SObject]]
    _more_results_callback: MoreResultsCallback | None
    _more_results: "Result | None" = None
    _more_fetched: bool = False
    _objects: tuple[tuple[str | None, _SObject], ...] | None = None

    @classmethod
    def from_response(
        cls,
        response: httpx.Response,
        object_map: Mapping[str, type[SObject]] | None = None,
        more: MoreResultsCallback | None = None,
        default_type: type[SObject] | None = None,
    ) -> "Result":
        """
        Build a Result from a raw Salesforce API response.

        Args:
            response: A completed API response
            object_map: Salesforce type name -> SObject class
            more: Callback to fetch the next page, given (nextRecordsUrl, sobject type)
            default_type: SObject class for records whose type is not mapped

        Raises:
            ResultError: UNEXPECTED_STATUS_CODE for anything but 200, 201 or 204
            ResultError: UNPARSABLE_RESPONSE if the body cannot be decoded
            UsageError: BAD_SFO_CLASSNAME if the resolved class is not an SObject
        """
        status = response.status_code
        if status == httpx.codes.NO_CONTENT:
            return cls({}, object_map, more, default_type)
        if status not in (httpx.codes.OK, httpx.codes.CREATED):
            raise ResultError(ResultErrorCode.UNEXPECTED_STATUS_CODE, {"status": status})
        try:
            return cls(response.json(), object_map, more, default_type)
        except SalesforceError:
            raise
        except Exception as e:
            raise ResultError(ResultErrorCode.UNPARSABLE_RESPONSE) from e

    def __init__(
        self,
        results: Mapping[str, Any],
        object_map: Mapping[str, type[SObject]] | None = None,
        more: MoreResultsCallback | None = None,
        default_type: type[SObject] | None = None,
    ):
        if not isinstance(results, Mapping):
            raise ResultError(
                ResultErrorCode.UNPARSABLE_RESPONSE, {"body": results}
            )
        # normalize single-record (retrieve) vs. record list (query) responses
        if results.get("attributes") is not None:
            results = {"done": True, "totalSize": 1, "records": [results]}
        if (records := results.get("records")) is not None and not isinstance(
            records, list
        ):
            raise ResultError(
                ResultErrorCode.UNPARSABLE_RESPONSE, {"body": results}
            )
        self.results = results  # type: ignore
        self.object_map = object_map if object_map is not None else {}
        self._more_results_callback = more

        fqcn = self.object_map.get(self._first_record_type(), None)
        if fqcn is None:
            fqcn = default_type or self.DEFAULT_TYPE
        if not _is_sobject_subclass(fqcn):
            raise UsageError(UsageErrorCode.BAD_SFO_CLASSNAME, {"fqcn": fqcn})
        self.sobject_type = fqcn  # type: ignore

    def _first_record_type(self) -> str | None:
        records = self.results.get("records")
        if not records or not isinstance(records[0], Mapping):
            return None
        attributes = records[0].get("attributes")
        if not isinstance(attributes, Mapping):
            return None
        return attributes.get("type")

    @property
    def done(self) -> bool:
        return self.results.get("done", True)

    @property
    def total_size(self) -> int:
        records = self.results.get("records") or []
        return self.results.get("totalSize", len(records))

    @property
    def next_records_url(self) -> str | None:
        return self.results.get("nextRecordsUrl")

    def clear_cache(self) -> None:
        """Drop this page's cached objects, so the next iteration parses records again."""
        if self._objects is not None:
            LOGGER.debug(
                "Clearing %d cached %s objects",
                len(self._objects),
                self.sobject_type.__qualname__,
            )
        self._objects = None

    def first(self) -> _SObject | None:
        """
        The first object in the result, or None if there are none.
        Mainly useful where exactly one record is expected.
        """
        return first(self, None)

    def last_id(self) -> str | None:
        """The Id returned with this result, if any (i.e., for create calls)."""
        return self.results.get("id")

    def more(self) -> "Result | None":
        """
        The next page of results, if any.
        The callback is invoked at most once per successful call; a callback
        that raises is called again on the next request.
        """
        if not self._more_fetched:
            next_records_url = self.results.get("nextRecordsUrl")
            if self._more_results_callback is not None and next_records_url:
                LOGGER.debug(
                    "Requesting more %s results from %s",
                    self.sobject_type.__qualname__,
                    next_records_url,
                )
                self._more_results = self._more_results_callback(
                    next_records_url, self.sobject_type
                )
            self._more_fetched = True
        return self._more_results

    def items(self) -> Iterator[tuple[str | None, _SObject]]:
        """
        Iterate (Id, object) pairs across this page and all following pages.

        Raises:
            ResultError: UNPARSABLE_RECORD if a record cannot be parsed
        """
        if self._objects is not None:
            for object_id, sobject in self._objects:
                yield object_id, copy.copy(sobject)
        else:
            yield from self._parse_objects()

        if (more := self.more()) is not None:
            yield from more.items()

    def __iter__(self) -> Iterator[_SObject]:
        for _, sobject in self.items():
            yield sobject

    def to_dict(self) -> dict[str | None, _SObject]:
        """
        All objects across every page, keyed by Id.
        Every page is fetched and held in memory; use with caution on large results.
        """
        return dict(self.items())

    def _parse_record(self, record: RawRecord) -> RawRecord:
        parsed = dict(record)
        for name, value in record.items():
            if not isinstance(value, Mapping):
                continue
            # nested result (child relationship list); its rows type themselves
            if value.get("records") is not None:
                parsed[name] = Result(value, self.object_map, self._more_results_callback)
            # nested object (lookup)
            elif value.get("attributes") is not None:
                parsed[name] = Result(
                    value, self.object_map, self._more_results_callback
                ).first()
        return parsed

    def _parse_objects(self) -> Iterator[tuple[str | None, _SObject]]:
        objects: list[tuple[str | None, _SObject]] = []
        for record in self.results.get("records") or []:
            sobject = None
            try:
                sobject = self.sobject_type.from_record(self._parse_record(record))
                object_id = sobject.identity
            except Exception as e:
                LOGGER.warning(
                    "Failed to parse %s record: %s", self.sobject_type.__qualname__, e
                )
                raise ResultError(
                    ResultErrorCode.UNPARSABLE_RECORD,
                    {"record": record, "fqcn": self.sobject_type, "object": sobject},
                ) from e
            objects.append((object_id, sobject))
            # hand out a copy so callers can't modify the cache
            yield object_id, copy.copy(sobject)

        self._objects = tuple(objects)
        LOGGER.debug(
            "Cached %d %s objects", len(objects), self.sobject_type.__qualname__
        )

    def __repr__(self):
        cached = "cached" if self._objects is not None else "not cached"
        return (
            f"<{type(self).__name__}[{self.sobject_type.__qualname__}] "
            f"{len(self.results.get('records') or [])} of {self.total_size} records, {cached}>"
        )
