"""
Serialization of typed values for the insert RPCs.

Records (insertRecord/insertRecords) send each value as one type byte followed by
the big-endian value. Tablets (insertTablet/insertTablets) send timestamps and values
column by column, using the same value encodings the query result decoder reads.
"""

import struct
from typing import Any, List, Optional, Sequence

from iotdb_session.types import DataType, Field

_VALUE_FORMATS = {
    DataType.BOOLEAN: ">?",
    DataType.INT32: ">i",
    DataType.INT64: ">q",
    DataType.FLOAT: ">f",
    DataType.DOUBLE: ">d",
}


def _to_text_bytes(value) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def encode_value(data_type: DataType, value: Any) -> bytes:
    """Big-endian encoding of one non-null value, TEXT as int32 length + bytes."""
    data_type = DataType(data_type)
    if data_type == DataType.TEXT:
        payload = _to_text_bytes(value)
        return struct.pack(">i", len(payload)) + payload
    # Field checks the Python type and the integer range
    checked = Field(data_type, value).get_object_value()
    return struct.pack(_VALUE_FORMATS[data_type], checked)


def serialize_record_values(
    data_types: Sequence[DataType], values: Sequence[Any]
) -> bytes:
    """Encode the values of one record, each prefixed by its type code."""
    if len(data_types) != len(values):
        raise ValueError(
            "Got {} data types for {} values".format(len(data_types), len(values))
        )
    buffer = bytearray()
    for (data_type, value) in zip(data_types, values):
        if value is None:
            raise ValueError("Record values cannot be None; omit the measurement instead")
        buffer += struct.pack(">b", int(data_type))
        buffer += encode_value(data_type, value)
    return bytes(buffer)


class Tablet:
    """
    Rows of one device sharing a list of measurements.

    :param device_id: Device path, e.g. "root.ln.wf01.wt01"
    :param measurements: Measurement names
    :param data_types: DataType of each measurement
    :param values: One list of values per row, parallel to ``measurements``.
        None marks a null cell.
    :param timestamps: One timestamp (ms) per row
    """

    def __init__(
        self,
        device_id: str,
        measurements: List[str],
        data_types: List[DataType],
        values: List[List[Any]],
        timestamps: List[int],
    ):
        if len(measurements) != len(data_types):
            raise ValueError("measurements and data_types must have the same length")
        if len(values) != len(timestamps):
            raise ValueError("values and timestamps must have the same length")
        for row in values:
            if len(row) != len(measurements):
                raise ValueError(
                    "Row {} does not have {} values".format(row, len(measurements))
                )

        # Sort rows by time; the server expects non-decreasing timestamps
        order = sorted(range(len(timestamps)), key=lambda i: timestamps[i])
        self.device_id = device_id
        self.measurements = list(measurements)
        self.data_types = [DataType(t) for t in data_types]
        self.timestamps = [timestamps[i] for i in order]
        self.values = [list(values[i]) for i in order]

    @property
    def row_count(self) -> int:
        return len(self.timestamps)

    def get_binary_timestamps(self) -> bytes:
        return struct.pack(">{}q".format(self.row_count), *self.timestamps)

    def _null_bitmap(self, column: int) -> Optional[bytes]:
        nulls = [row[column] is None for row in self.values]
        if not any(nulls):
            return None
        bitmap = bytearray((self.row_count + 7) // 8)
        for (row_index, is_null) in enumerate(nulls):
            if is_null:
                bitmap[row_index // 8] |= 1 << (row_index % 8)
        return bytes(bitmap)

    def get_binary_values(self) -> bytes:
        """
        Values column by column. A null cell is written as a zero placeholder and, when
        any cell is null, every column is followed by a flag byte and, if the flag is
        set, an LSB-first bitmap in which a set bit marks a null row.
        """
        buffer = bytearray()
        for (column, data_type) in enumerate(self.data_types):
            placeholder = b"" if data_type == DataType.TEXT else _zero(data_type)
            for row in self.values:
                buffer += encode_value(
                    data_type, placeholder if row[column] is None else row[column]
                )

        bitmaps = [self._null_bitmap(column) for column in range(len(self.data_types))]
        if any(bitmap is not None for bitmap in bitmaps):
            for bitmap in bitmaps:
                buffer += struct.pack(">?", bitmap is not None)
                if bitmap is not None:
                    buffer += bitmap
        return bytes(buffer)


def _zero(data_type: DataType):
    if data_type == DataType.BOOLEAN:
        return False
    if data_type in (DataType.FLOAT, DataType.DOUBLE):
        return 0.0
    return 0
