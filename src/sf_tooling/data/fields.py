from collections.abc import Callable, MutableMapping, MutableSequence
import typing
from typing_extensions import override

from ..logger import getLogger

_logger = getLogger("fields")

T = typing.TypeVar("T")
_FCO = typing.TypeVar("_FCO", bound="FieldConfigurableObject")


class FieldConfigurableObject:
    """
    Record type whose attributes are declared as `Field` descriptors.
    Attribute names are the JSON keys of the record, and only values that
    have been set are serialized.
    """

    _values: dict[str, typing.Any]
    _fields: typing.ClassVar[dict[str, "Field"]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._fields = {}
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                if isinstance(attr, Field):
                    cls._fields[attr_name] = attr

    def __init__(self, **fields):
        self._values = {}
        for name, value in fields.items():
            self[name] = value

    @classmethod
    def keys(cls) -> frozenset[str]:
        return frozenset(cls._fields.keys())

    @classmethod
    def from_json(cls: type[_FCO], data: dict[str, typing.Any]) -> _FCO:
        """Build a record from decoded JSON, ignoring keys this type does not declare."""
        if not isinstance(data, dict):
            raise TypeError(
                f"Expected a JSON object to build {cls.__name__}, got {type(data).__name__}"
            )
        instance = cls()
        instance.update(data)
        return instance

    def update(self, data: typing.Mapping[str, typing.Any]):
        keys = self.keys()
        unknown = [name for name in data if name not in keys]
        if unknown:
            _logger.debug(
                "Ignoring undeclared fields on %s: %s",
                type(self).__name__,
                ", ".join(unknown),
            )
        for name, value in data.items():
            if name in keys:
                setattr(self, name, value)

    def serialize(self) -> dict[str, typing.Any]:
        return {
            name: self._fields[name].format(value)
            for name, value in self._values.items()
        }

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __getitem__(self, name):
        if name not in self.keys():
            raise KeyError(f"Undefined field {name} on object {type(self)}")
        return getattr(self, name, None)

    def __setitem__(self, name, value):
        if name not in self.keys():
            raise KeyError(f"Undefined field {name} on object {type(self)}")
        setattr(self, name, value)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    def __repr__(self):
        values = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__name__}({values})"


class Field(typing.Generic[T]):
    _py_type: type[T] | tuple[type, ...] | None = None

    def __init__(self, py_type: type[T] | tuple[type, ...] | None):
        self._py_type = py_type

    def __set_name__(self, owner, name):
        self.__owner__ = owner
        self.__name__ = name

    def __get__(self, obj: FieldConfigurableObject | None, objtype=None) -> T:
        if obj is None:
            return self  # type: ignore
        return obj._values.get(self.__name__, None)

    def __set__(self, obj: FieldConfigurableObject, value: typing.Any):
        value = self.revive(value)
        self.validate(value)
        obj._values[self.__name__] = value

    def __delete__(self, obj: FieldConfigurableObject):
        obj._values.pop(self.__name__, None)

    def revive(self, value: typing.Any):
        return value

    def format(self, value: T) -> typing.Any:
        return value

    def validate(self, value):
        if value is None or self._py_type is None:
            return
        if not isinstance(value, self._py_type):
            raise TypeError(
                f"Expected {self._type_name()} for field {self.__name__} "
                f"on {self.__owner__.__name__}, got {type(value).__name__}"
            )

    def _type_name(self):
        if isinstance(self._py_type, tuple):
            return " | ".join(t.__qualname__ for t in self._py_type)
        assert self._py_type is not None
        return self._py_type.__qualname__


class TextField(Field[str]):
    def __init__(self):
        super().__init__(str)


class IntField(Field[int]):
    def __init__(self):
        super().__init__(int)

    @override
    def validate(self, value):
        if isinstance(value, bool):
            raise TypeError(
                f"Expected int for field {self.__name__} "
                f"on {self.__owner__.__name__}, got bool"
            )
        super().validate(value)


class NumberField(Field[float]):
    def __init__(self):
        super().__init__(float)

    @override
    def revive(self, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return value


class CheckboxField(Field[bool]):
    def __init__(self):
        super().__init__(bool)


class ListField(Field[list[T]]):
    """A JSON array; items are revived into `item_type` when it is a record type."""

    def __init__(self, item_type: type[T]):
        super().__init__(list)
        self._item_type = item_type

    @override
    def revive(self, value):
        if value is None:
            return value
        if not isinstance(value, (list, tuple)):
            return value
        if issubclass(self._item_type, FieldConfigurableObject):
            return [
                item if isinstance(item, self._item_type)
                else self._item_type.from_json(item)
                for item in value
            ]
        return list(value)

    @override
    def format(self, value):
        return [
            item.serialize() if isinstance(item, FieldConfigurableObject) else item
            for item in value
        ]


Destination = typing.Union[type[T], Callable[[typing.Any], T], T]


def decode_into(payload: typing.Any, destination: "Destination | None" = None):
    """
    Places decoded JSON into `destination`:
    * `None` returns the payload unchanged
    * a `FieldConfigurableObject` subclass is built from the payload's keys
    * a `FieldConfigurableObject` or mutable mapping instance is updated in place
    * a mutable sequence instance is extended in place
    * any other callable (e.g. `str`, `dict`) is called with the payload
    """
    if destination is None:
        return payload
    if isinstance(destination, type) and issubclass(destination, FieldConfigurableObject):
        return destination.from_json(payload)
    if isinstance(destination, (FieldConfigurableObject, MutableMapping)):
        destination.update(payload)
        return destination
    if isinstance(destination, MutableSequence):
        destination.extend(payload)
        return destination
    if callable(destination):
        return destination(payload)
    raise TypeError(f"Cannot decode a response into {destination!r}")
