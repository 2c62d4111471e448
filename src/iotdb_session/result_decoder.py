"""
Decoding of the packed columnar query result sent by the server.

A result batch (TSQueryDataSet) carries, per column, a value buffer and a null
bitmap buffer, plus one shared buffer of big-endian int64 timestamps. There is
no row count: rows are decoded until every value buffer is exhausted.

Value encodings, all big-endian:
    BOOLEAN   1 byte, equal to 1 means true
    INT32     4 byte signed integer
    INT64     8 byte signed integer
    FLOAT     4 byte IEEE-754 single
    DOUBLE    8 byte IEEE-754 double
    TEXT      4 byte signed length followed by that many raw bytes

Null flags are read from the first byte of a column's bitmap buffer, most
significant bit first: row ``r`` is non-null iff ``(0x80 >> (r % 8)) & bitmap``.
A null cell consumes no value bytes.
"""

import logging
import struct
from typing import List, Mapping, Optional, Sequence

from iotdb_session.exc import DecodeError
from iotdb_session.types import DataType, Field, RowRecord

logger = logging.getLogger(__name__)

NULL_FLAG = 0x80
ROWS_PER_BITMAP_BYTE = 8

_FIXED_WIDTH_FORMATS = {
    DataType.INT32: struct.Struct(">i"),
    DataType.INT64: struct.Struct(">q"),
    DataType.FLOAT: struct.Struct(">f"),
    DataType.DOUBLE: struct.Struct(">d"),
}
_TIMESTAMP = struct.Struct(">q")
_TEXT_LENGTH = struct.Struct(">i")


class ByteCursor:
    """Forward-only reader over one wire buffer."""

    def __init__(self, buffer: Optional[bytes], name: str):
        self._buffer = memoryview(buffer or b"")
        self._offset = 0
        self.name = name

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self._offset

    def read(self, n: int) -> bytes:
        if n < 0:
            raise DecodeError(
                "Negative length {} in {}".format(n, self.name),
                {"buffer": self.name, "offset": self._offset},
            )
        if n > self.remaining:
            raise DecodeError(
                "Truncated result: {} needs {} more bytes but only {} remain".format(
                    self.name, n, self.remaining
                ),
                {"buffer": self.name, "offset": self._offset, "needed": n},
            )
        chunk = self._buffer[self._offset : self._offset + n].tobytes()
        self._offset += n
        return chunk

    def unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read(fmt.size))[0]


def is_non_null(bitmap: int, row_index: int) -> bool:
    return (NULL_FLAG >> (row_index % ROWS_PER_BITMAP_BYTE)) & bitmap != 0


def read_value(cursor: ByteCursor, data_type: DataType):
    """Consume one non-null value of the given type from the front of ``cursor``."""
    if data_type == DataType.BOOLEAN:
        return cursor.read(1)[0] == 1
    if data_type == DataType.TEXT:
        length = cursor.unpack(_TEXT_LENGTH)
        return cursor.read(length)
    return cursor.unpack(_FIXED_WIDTH_FORMATS[data_type])


def resolve_buffer_index(
    column_name: str,
    position: int,
    column_name_index_map: Optional[Mapping[str, int]],
) -> int:
    """
    The physical buffer a column is stored in. The server may order buffers
    differently from the column name list and says so through the name->index map;
    columns missing from the map fall back to their logical position.
    """
    if column_name_index_map is None:
        return position
    return column_name_index_map.get(column_name, position)


def decode_rows(
    columns: Sequence[str],
    data_types: Sequence[DataType],
    value_list: Sequence[bytes],
    bitmap_list: Sequence[bytes],
    time: Optional[bytes] = None,
    column_name_index_map: Optional[Mapping[str, int]] = None,
) -> List[RowRecord]:
    """
    Turn one result batch into rows.

    :param columns: Column names in the order the rows' fields should follow
    :param data_types: Declared type of each column, parallel to ``columns``
    :param value_list: Per-buffer value bytes
    :param bitmap_list: Per-buffer null bitmaps
    :param time: Big-endian int64 timestamps, absent or empty for results that are not
        time series (the rows then have no timestamp)
    :param column_name_index_map: Optional column name -> buffer index remapping
    :raises DecodeError: if the payload is inconsistent or truncated
    """
    if len(columns) != len(data_types):
        raise DecodeError(
            "Result declares {} columns but {} data types".format(
                len(columns), len(data_types)
            )
        )

    value_cursors = [
        ByteCursor(buffer, "value buffer {}".format(i))
        for (i, buffer) in enumerate(value_list)
    ]
    time_cursor = ByteCursor(time, "time buffer")

    layout = []
    for (position, (name, data_type)) in enumerate(zip(columns, data_types)):
        index = resolve_buffer_index(name, position, column_name_index_map)
        if not 0 <= index < len(value_cursors) or index >= len(bitmap_list):
            raise DecodeError(
                "Column {!r} maps to buffer {} but the result carries {} value and "
                "{} bitmap buffers".format(
                    name, index, len(value_cursors), len(bitmap_list)
                ),
                {"column": name, "buffer-index": index},
            )
        layout.append((index, data_type))

    def has_more_rows():
        if layout:
            return sum(c.remaining for c in value_cursors) > 0
        # With no value columns the timestamps are the only thing left to drive rows
        return time_cursor.remaining > 0

    rows = []
    row_index = 0
    rows_without_progress = 0
    while has_more_rows():
        timestamp = (
            time_cursor.unpack(_TIMESTAMP) if time_cursor.remaining > 0 else None
        )
        row = RowRecord(timestamp)
        consumed = 0
        for (index, data_type) in layout:
            bitmap_buffer = bitmap_list[index]
            if not bitmap_buffer:
                raise DecodeError(
                    "Bitmap buffer {} is empty".format(index),
                    {"buffer-index": index, "row": row_index},
                )
            if is_non_null(bitmap_buffer[0], row_index):
                cursor = value_cursors[index]
                before = cursor.remaining
                row.add_field(Field(data_type, read_value(cursor, data_type)))
                consumed += before - cursor.remaining
            else:
                row.add_field(Field(data_type))
        rows.append(row)
        row_index += 1

        # The null pattern repeats every 8 rows, so 8 rows that consume nothing while
        # value bytes remain can never make progress.
        if consumed or not layout:
            rows_without_progress = 0
        else:
            rows_without_progress += 1
            if rows_without_progress >= ROWS_PER_BITMAP_BYTE:
                raise DecodeError(
                    "Bitmaps mark every row null but {} value bytes remain".format(
                        sum(c.remaining for c in value_cursors)
                    ),
                    {"row": row_index},
                )

    logger.debug("Decoded %d rows over %d columns", len(rows), len(layout))
    return rows
