import datetime
from enum import Flag, auto
import typing
from typing_extensions import override

T = typing.TypeVar("T")


class ReadOnlyAssignmentException(TypeError): ...


class FieldFlag(Flag):
    readonly = auto()


class FieldConfigurableObject:
    """
    Base for objects whose attributes are described by `Field` descriptors.

    Values live in a per-instance store. Declared fields are revived and
    validated on assignment; any other name is kept as a plain value so that
    records carrying extra columns (relationship fields, aggregates) still load.
    """

    _values: dict[str, typing.Any]
    _fields: typing.ClassVar[dict[str, "Field"]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._fields = {}
        for attr_name in dir(cls):
            if attr_name.startswith("__"):
                continue
            attr = getattr(cls, attr_name, None)
            if isinstance(attr, Field):
                cls._fields[attr_name] = attr

    def __init__(self, /, **fields):
        object.__setattr__(self, "_values", {})
        for name, value in fields.items():
            setattr(self, name, value)

    @classmethod
    def keys(cls) -> frozenset[str]:
        return frozenset(cls._fields.keys())

    def values(self) -> dict[str, typing.Any]:
        return dict(self._values)

    def __getattr__(self, name):
        # only reached for names without a class attribute (undeclared fields)
        try:
            return object.__getattribute__(self, "_values")[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            ) from None

    def __setattr__(self, name, value):
        if name in self._fields or name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self._values[name] = value

    def __getitem__(self, name):
        if name in self._fields:
            return getattr(self, name)
        return self._values[name]

    def __setitem__(self, name, value):
        setattr(self, name, value)

    def __contains__(self, name):
        return name in self._values


class Field(typing.Generic[T]):
    _py_type: type[T] | None = None
    flags: set[FieldFlag]

    def __init__(self, py_type: type[T] | None, *flags: FieldFlag):
        self._py_type = py_type
        self.flags = set(flags)

    def __get__(self, obj: FieldConfigurableObject | None, objtype=None) -> T:
        if obj is None:
            return self  # type: ignore
        return obj._values.get(self.__name__, None)

    def __set__(self, obj: FieldConfigurableObject, value: typing.Any):
        object_values = obj._values
        if FieldFlag.readonly in self.flags and self.__name__ in object_values:
            raise ReadOnlyAssignmentException(f"Field {self.__name__} is readonly")
        if value is not None:
            value = self.revive(value)
            self.validate(value)
        object_values[self.__name__] = value

    def revive(self, value: typing.Any):
        return value

    def __set_name__(self, owner, name):
        self.__owner__ = owner
        self.__name__ = name

    def validate(self, value):
        if self._py_type is not None and not isinstance(value, self._py_type):
            raise TypeError(
                f"Expected {self._py_type.__qualname__} for field {self.__name__} "
                f"on {self.__owner__.__name__}, got {type(value).__name__}"
            )

    def __repr__(self):
        return f"{type(self).__name__}({getattr(self, '__name__', '')})"


class TextField(Field[str]):
    def __init__(self, *flags: FieldFlag):
        super().__init__(str, *flags)


class IdField(TextField):
    def validate(self, value):
        if not (isinstance(value, str) and len(value) in (15, 18) and value.isalnum()):
            raise ValueError(f"'{value}' is not a valid Salesforce Id")


class NumberField(Field[float]):
    def __init__(self, *flags: FieldFlag):
        super().__init__(float, *flags)

    @override
    def revive(self, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return value


class IntField(Field[int]):
    def __init__(self, *flags: FieldFlag):
        super().__init__(int, *flags)

    @override
    def revive(self, value):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class CheckboxField(Field[bool]):
    def __init__(self, *flags: FieldFlag):
        super().__init__(bool, *flags)


class DateField(Field[datetime.date]):
    def __init__(self, *flags: FieldFlag):
        super().__init__(datetime.date, *flags)

    @override
    def revive(self, value: datetime.date | str):
        if isinstance(value, datetime.date):
            return value
        return datetime.date.fromisoformat(value)


class DateTimeField(Field[datetime.datetime]):
    def __init__(self, *flags: FieldFlag):
        super().__init__(datetime.datetime, *flags)

    @override
    def revive(self, value: datetime.datetime | str):
        if isinstance(value, datetime.datetime):
            return value
        return datetime.datetime.fromisoformat(str(value))


class ReferenceField(Field[T]):
    """
    A lookup to a single related record.

    Nested records arrive already parsed into objects; a plain dict is revived
    through the target type's `from_record`.
    """

    @override
    def revive(self, value):
        assert self._py_type is not None
        if isinstance(value, self._py_type):
            return value
        if isinstance(value, dict):
            if (from_record := getattr(self._py_type, "from_record", None)) is not None:
                return from_record(value)
            return self._py_type(**value)
        return value
