import copy
from collections.abc import Mapping
from typing import Any, ClassVar
from typing_extensions import Self

from ..logger import getLogger
from .._models import SObjectAttributes
from ..exceptions import UsageError, UsageErrorCode
from .fields import FieldConfigurableObject

_logger = getLogger("sobject")


class SObject(FieldConfigurableObject):
    """
    A Salesforce record.

    `SObject` itself is the generic type records fall back to when their
    `attributes.type` is not in an object map; it accepts any field. Subclass it
    to declare typed fields:

        class Account(SObject):
            Id = IdField()
            Name = TextField()

        class Product(SObject, api_name="Product2"): ...
    """

    attributes: ClassVar[SObjectAttributes] = SObjectAttributes("SObject")
    _record_type: str | None = None

    def __init_subclass__(
        cls,
        api_name: str | None = None,
        id_field: str = "Id",
        **kwargs,
    ) -> None:
        super().__init_subclass__(**kwargs)
        cls.attributes = SObjectAttributes(api_name or cls.__name__, id_field)

    def __init__(self, /, **fields):
        attributes = fields.pop("attributes", None)
        if isinstance(attributes, Mapping):
            self._record_type = attributes.get("type")
        super().__init__(**fields)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Self:
        return cls(**record)

    @property
    def identity(self) -> str | None:
        return self._values.get(self.attributes.id_field)

    @property
    def record_type(self) -> str:
        """The Salesforce type this record was returned as."""
        return self._record_type or self.attributes.type

    def __copy__(self) -> Self:
        duplicate = type(self).__new__(type(self))
        duplicate._record_type = self._record_type
        object.__setattr__(
            duplicate,
            "_values",
            {name: _detached(value) for name, value in self._values.items()},
        )
        return duplicate

    def __eq__(self, other):
        if not isinstance(other, SObject):
            return NotImplemented
        return type(self) is type(other) and self._values == other._values

    def __repr__(self):
        fields = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__name__}({fields})"


def _detached(value):
    # nested Results are shared; they hand out their own copies when iterated
    if isinstance(value, SObject):
        return copy.copy(value)
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


def _is_sobject_subclass(cls) -> bool:
    return isinstance(cls, type) and issubclass(cls, SObject)


def object_map(*sobject_types: type[SObject]) -> dict[str, type[SObject]]:
    """
    Build a Salesforce type name -> SObject class mapping for use with `Result`.

    Raises:
        UsageError: BAD_SFO_CLASSNAME if any entry is not an SObject subclass
    """
    mapping: dict[str, type[SObject]] = {}
    for sobject_type in sobject_types:
        if not _is_sobject_subclass(sobject_type):
            raise UsageError(UsageErrorCode.BAD_SFO_CLASSNAME, {"fqcn": sobject_type})
        if sobject_type.attributes.type in mapping:
            _logger.warning(
                "%s replaces %s for type %s in object map",
                sobject_type.__qualname__,
                mapping[sobject_type.attributes.type].__qualname__,
                sobject_type.attributes.type,
            )
        mapping[sobject_type.attributes.type] = sobject_type
    return mapping
