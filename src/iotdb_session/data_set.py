from typing import Dict, Iterator, List, Optional

import pandas
import pyarrow

from iotdb_session.result_decoder import decode_rows
from iotdb_session.types import DataType, RowRecord

TIMESTAMP_COLUMN = "Time"

_ARROW_TYPES = {
    DataType.BOOLEAN: pyarrow.bool_(),
    DataType.INT32: pyarrow.int32(),
    DataType.INT64: pyarrow.int64(),
    DataType.FLOAT: pyarrow.float32(),
    DataType.DOUBLE: pyarrow.float64(),
    DataType.TEXT: pyarrow.binary(),
}


class DataSet:
    """
    The decoded result of one statement.

    ``columns``, ``data_types`` and every row's fields are parallel. The
    timestamp is not one of the columns: each row carries it separately and
    ``column_names`` prefixes it as "Time" unless the result ignores timestamps.
    A DataSet holds no reference to the session that produced it.
    """

    def __init__(
        self,
        statement: str,
        columns: List[str],
        data_types: List[DataType],
        rows: List[RowRecord],
        query_id: Optional[int] = None,
        ignore_timestamp: bool = False,
        column_name_index_map: Optional[Dict[str, int]] = None,
        is_empty: bool = False,
    ):
        self.statement = statement
        self.columns = list(columns)
        self.data_types = list(data_types)
        self.rows = rows
        self.query_id = query_id
        self.ignore_timestamp = ignore_timestamp
        self.column_name_index_map = column_name_index_map
        self.is_empty = is_empty

    @classmethod
    def empty(cls, statement: str = "", query_id: Optional[int] = None) -> "DataSet":
        """The canonical "nothing to show" result: no columns and no rows."""
        return cls(statement, [], [], [], query_id=query_id, is_empty=True)

    @classmethod
    def from_execute_response(cls, statement: str, resp) -> "DataSet":
        """
        Build a DataSet from a TSExecuteStatementResp whose status was already checked.
        Responses without a query data set (DDL routed through the query path, updates)
        produce the empty DataSet.
        """
        if resp.queryDataSet is None:
            return cls.empty(statement, resp.queryId)

        columns = resp.columns or []
        data_types = [DataType.from_tag(tag) for tag in (resp.dataTypeList or [])]
        query_data_set = resp.queryDataSet
        rows = decode_rows(
            columns,
            data_types,
            query_data_set.valueList or [],
            query_data_set.bitmapList or [],
            time=query_data_set.time,
            column_name_index_map=resp.columnNameIndexMap,
        )
        return cls(
            statement,
            columns,
            data_types,
            rows,
            query_id=resp.queryId,
            ignore_timestamp=bool(resp.ignoreTimeStamp),
            column_name_index_map=resp.columnNameIndexMap,
        )

    @property
    def has_timestamps(self) -> bool:
        return not self.is_empty and not self.ignore_timestamp

    @property
    def column_names(self) -> List[str]:
        if self.has_timestamps:
            return [TIMESTAMP_COLUMN] + self.columns
        return list(self.columns)

    def __iter__(self) -> Iterator[RowRecord]:
        return iter(self.rows)

    def __len__(self):
        return len(self.rows)

    def __repr__(self):
        return "DataSet(statement={!r}, columns={}, rows={})".format(
            self.statement, self.column_names, len(self.rows)
        )

    def to_arrow_table(self) -> "pyarrow.Table":
        if self.is_empty:
            return pyarrow.schema([]).empty_table()
        arrays = []
        if self.has_timestamps:
            arrays.append(
                pyarrow.array(
                    [row.timestamp for row in self.rows], type=pyarrow.timestamp("ms")
                )
            )
        for (i, data_type) in enumerate(self.data_types):
            arrays.append(
                pyarrow.array(
                    [row.fields[i].get_object_value() for row in self.rows],
                    type=_ARROW_TYPES[data_type],
                )
            )
        return pyarrow.Table.from_arrays(arrays, names=self.column_names)

    def to_pandas(self) -> "pandas.DataFrame":
        if self.is_empty:
            return pandas.DataFrame()
        return self.to_arrow_table().to_pandas()
