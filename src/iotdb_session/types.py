from dataclasses import dataclass, field
from enum import IntEnum
from numbers import Integral, Real
from typing import Any, List, Optional

from iotdb_session.exc import UnknownVariantError

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


class _CodedEnum(IntEnum):
    """
    An enum whose integer values are the codes agreed with the server.

    ``from_code`` is the inverse of ``int(member)``; unknown codes raise
    UnknownVariantError instead of ValueError so that malformed server input
    surfaces as a decode problem.
    """

    @classmethod
    def from_code(cls, code: int):
        try:
            return cls(code)
        except ValueError:
            raise UnknownVariantError(cls.__name__, code) from None

    @classmethod
    def from_tag(cls, tag):
        """
        Resolve a server type tag, which may be the integer code, the code rendered as a
        decimal string or the member name (e.g. 3, "3" or "FLOAT").
        """
        if isinstance(tag, bool):
            raise UnknownVariantError(cls.__name__, tag)
        if isinstance(tag, Integral):
            return cls.from_code(int(tag))
        if isinstance(tag, str):
            name = tag.strip()
            if name.lstrip("-").isdigit():
                return cls.from_code(int(name))
            try:
                return cls[name.upper()]
            except KeyError:
                raise UnknownVariantError(cls.__name__, tag) from None
        raise UnknownVariantError(cls.__name__, tag)


class DataType(_CodedEnum):
    BOOLEAN = 0
    INT32 = 1
    INT64 = 2
    FLOAT = 3
    DOUBLE = 4
    TEXT = 5


class Encoding(_CodedEnum):
    PLAIN = 0
    PLAIN_DICTIONARY = 1
    RLE = 2
    DIFF = 3
    TS_2DIFF = 4
    BITMAP = 5
    GORILLA_V1 = 6
    REGULAR = 7
    GORILLA = 8


class Compressor(_CodedEnum):
    UNCOMPRESSED = 0
    SNAPPY = 1
    GZIP = 2
    LZO = 3
    SDT = 4
    PAA = 5
    PLA = 6
    LZ4 = 7


def _check_value(data_type: DataType, value: Any):
    if value is None:
        return None
    if data_type == DataType.BOOLEAN:
        if not isinstance(value, bool):
            raise TypeError("BOOLEAN field expects a bool, got {!r}".format(value))
        return value
    if data_type in (DataType.INT32, DataType.INT64):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise TypeError(
                "{} field expects an int, got {!r}".format(data_type.name, value)
            )
        low, high = (
            (INT32_MIN, INT32_MAX)
            if data_type == DataType.INT32
            else (INT64_MIN, INT64_MAX)
        )
        if not low <= value <= high:
            raise ValueError(
                "{} out of range for {}".format(value, data_type.name)
            )
        return int(value)
    if data_type in (DataType.FLOAT, DataType.DOUBLE):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise TypeError(
                "{} field expects a number, got {!r}".format(data_type.name, value)
            )
        return float(value)
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("TEXT field expects bytes, got {!r}".format(value))
    return bytes(value)


class Field:
    """
    One cell of a result row.

    A Field holds at most one value and that value always matches its data type:
    bool for BOOLEAN, int for INT32/INT64, float for FLOAT/DOUBLE and raw bytes for
    TEXT. A value of None means the cell is null.
    """

    __slots__ = ("_data_type", "_value")

    def __init__(self, data_type: DataType, value: Any = None):
        self._data_type = DataType(data_type)
        self._value = _check_value(self._data_type, value)

    @property
    def data_type(self) -> DataType:
        return self._data_type

    @property
    def is_null(self) -> bool:
        return self._value is None

    def _value_if(self, *data_types):
        return self._value if self._data_type in data_types else None

    @property
    def bool_value(self) -> Optional[bool]:
        return self._value_if(DataType.BOOLEAN)

    @property
    def int_value(self) -> Optional[int]:
        return self._value_if(DataType.INT32)

    @property
    def long_value(self) -> Optional[int]:
        return self._value_if(DataType.INT64)

    @property
    def float_value(self) -> Optional[float]:
        return self._value_if(DataType.FLOAT)

    @property
    def double_value(self) -> Optional[float]:
        return self._value_if(DataType.DOUBLE)

    @property
    def binary_value(self) -> Optional[bytes]:
        return self._value_if(DataType.TEXT)

    def get_object_value(self) -> Any:
        return self._value

    def get_string_value(self) -> str:
        if self._value is None:
            return "null"
        if self._data_type == DataType.TEXT:
            return self._value.decode("utf-8", errors="replace")
        if self._data_type == DataType.BOOLEAN:
            return "true" if self._value else "false"
        return str(self._value)

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return self._data_type == other._data_type and self._value == other._value

    def __hash__(self):
        return hash((self._data_type, self._value))

    def __repr__(self):
        return "Field({}, {!r})".format(self._data_type.name, self._value)

    def __str__(self):
        return self.get_string_value()


@dataclass
class RowRecord:
    """A decoded result row: optional timestamp (ms since epoch) plus one Field per column."""

    timestamp: Optional[int]
    fields: List[Field] = field(default_factory=list)

    def add_field(self, value: Field):
        self.fields.append(value)

    def values(self) -> List[Any]:
        return [f.get_object_value() for f in self.fields]

    def __getitem__(self, index) -> Field:
        return self.fields[index]
