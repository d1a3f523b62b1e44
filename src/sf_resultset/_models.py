from typing import Any, TypedDict, Generic, TypeVar, NamedTuple
from typing_extensions import NotRequired


class SObjectAttributes(NamedTuple):
    type: str
    id_field: str = "Id"


class SObjectDictAttrs(TypedDict, total=False):
    type: str
    url: str


class SObjectDict(TypedDict, total=False):
    attributes: SObjectDictAttrs


SObjectRecordJSON = TypeVar("SObjectRecordJSON", bound=SObjectDict)

class QueryResultJSON(TypedDict, Generic[SObjectRecordJSON]):
    totalSize: int
    done: bool
    records: list[SObjectRecordJSON]
    nextRecordsUrl: NotRequired[str]
    id: NotRequired[str]


RawRecord = dict[str, Any]
