import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from iotdb_session.config import Config
from iotdb_session.data_set import DataSet
from iotdb_session.exc import SessionClosedError, SessionNotOpenError
from iotdb_session.tablet import Tablet, serialize_record_values
from iotdb_session.thrift_api.rpc import ttypes
from iotdb_session.thrift_backend import ThriftBackend
from iotdb_session.types import Compressor, DataType, Encoding

logger = logging.getLogger(__name__)


class SessionState(Enum):
    NEW = "new"
    OPEN = "open"
    CLOSED = "closed"


class Session:
    """
    A single authenticated connection to the server.

    A Session moves from NEW to OPEN with ``open()`` and from OPEN to CLOSED with
    ``close()``. A failed open leaves it NEW and a failed close leaves it OPEN. A closed
    Session never reopens; build a new one from the same Config instead.

    A Session is not safe for concurrent use from several threads: ``open()`` sets the
    session and statement ids every other operation reads.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.zone_id = self.config.zone_id
        self.session_id = -1
        self.statement_id = -1
        self._state = SessionState.NEW
        self._backend: Optional[ThriftBackend] = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "Session(endpoint={}, state={}, session_id={})".format(
            self.config.endpoint, self._state.name, self.session_id
        )

    @property
    def state(self) -> SessionState:
        return self._state

    def is_open(self) -> bool:
        return self._state == SessionState.OPEN

    def open(self) -> "Session":
        """
        Connect, authenticate and request a statement id.

        :raises SessionClosedError: if the session was already closed
        :raises ProtocolVersionMismatchError: if the server speaks another protocol version
        :raises ServerOperationError: if the server rejects the open request
        :raises RequestError: if the server cannot be reached
        """
        if self._state == SessionState.OPEN:
            return self
        if self._state == SessionState.CLOSED:
            raise SessionClosedError("Cannot reopen a closed session")

        config = self.config
        backend = ThriftBackend(
            config.endpoint,
            rpc_compaction=config.rpc_compaction,
            timeout=config.timeout,
        )
        response = backend.open_session(
            config.user,
            config.password,
            self.zone_id,
            config.protocol_version,
            config.configuration,
        )
        try:
            statement_id = backend.request_statement_id(response.sessionId)
        except Exception:
            backend.abandon_session(response.sessionId)
            raise

        self._backend = backend
        self.session_id = response.sessionId
        self.statement_id = statement_id
        self._state = SessionState.OPEN
        logger.info(
            "Opened session %s to %s as %s", self.session_id, config.endpoint, config.user
        )
        return self

    def close(self) -> None:
        """Close the session. Closing a session that is not open is a no-op."""
        if self._state == SessionState.CLOSED:
            return
        if self._state == SessionState.NEW:
            self._state = SessionState.CLOSED
            return

        self._backend.close_session(self.session_id)
        self._state = SessionState.CLOSED
        logger.info("Closed session %s", self.session_id)

    def _require_open(self):
        if self._state == SessionState.NEW:
            raise SessionNotOpenError("Session is not open")
        if self._state == SessionState.CLOSED:
            raise SessionClosedError("Session {} is closed".format(self.session_id))

    def _request(self, method_name: str, *args):
        self._require_open()
        return self._backend.make_request(method_name, *args, session_id=self.session_id)

    # Storage groups and time series

    def set_storage_group(self, storage_group: str) -> None:
        logger.debug("Set storage group %s", storage_group)
        self._request("setStorageGroup", self.session_id, storage_group)

    def delete_storage_group(self, storage_group: str) -> None:
        self.delete_storage_groups([storage_group])

    def delete_storage_groups(self, storage_groups: List[str]) -> None:
        logger.debug("Delete storage groups %s", storage_groups)
        self._request("deleteStorageGroups", self.session_id, list(storage_groups))

    def create_time_series(
        self,
        path: str,
        data_type: DataType,
        encoding: Encoding,
        compressor: Compressor,
        props: Optional[Dict[str, str]] = None,
        tags: Optional[Dict[str, str]] = None,
        attributes: Optional[Dict[str, str]] = None,
        alias: Optional[str] = None,
    ) -> None:
        """Create a time series unless one already exists at ``path``."""
        logger.debug("Create time series %s", path)
        if self.check_time_series_exists(path):
            logger.debug("Time series %s already exists", path)
            return
        req = ttypes.TSCreateTimeseriesReq(
            sessionId=self.session_id,
            path=path,
            dataType=int(DataType(data_type)),
            encoding=int(Encoding(encoding)),
            compressor=int(Compressor(compressor)),
            props=props,
            tags=tags,
            attributes=attributes,
            measurementAlias=alias,
        )
        self._request("createTimeseries", req)

    def create_multi_time_series(
        self,
        paths: List[str],
        data_types: List[DataType],
        encodings: List[Encoding],
        compressors: List[Compressor],
        props_list: Optional[List[Dict[str, str]]] = None,
        tags_list: Optional[List[Dict[str, str]]] = None,
        attributes_list: Optional[List[Dict[str, str]]] = None,
        alias_list: Optional[List[str]] = None,
    ) -> None:
        logger.debug("Create %d time series", len(paths))
        if not len(paths) == len(data_types) == len(encodings) == len(compressors):
            raise ValueError(
                "paths, data_types, encodings and compressors must have the same length"
            )
        req = ttypes.TSCreateMultiTimeseriesReq(
            sessionId=self.session_id,
            paths=list(paths),
            dataTypes=[int(DataType(t)) for t in data_types],
            encodings=[int(Encoding(e)) for e in encodings],
            compressors=[int(Compressor(c)) for c in compressors],
            propsList=props_list,
            tagsList=tags_list,
            attributesList=attributes_list,
            measurementAliasList=alias_list,
        )
        self._request("createMultiTimeseries", req)

    def delete_time_series(self, paths: List[str]) -> None:
        logger.debug("Delete time series %s", paths)
        self._request("deleteTimeseries", self.session_id, list(paths))

    def check_time_series_exists(self, path: str) -> bool:
        """
        Probe for a time series with "SHOW TIMESERIES". The probe's query is always
        cancelled afterwards so no result set stays open on the server.
        """
        data_set = self.query("SHOW TIMESERIES {}".format(path))
        try:
            return len(data_set) > 0
        finally:
            if data_set.query_id is not None:
                self.cancel_operation(data_set.query_id)

    def delete_data(self, paths: List[str], end_time: int, start_time: int = 0) -> None:
        """Delete the data points of ``paths`` with start_time <= time <= end_time."""
        logger.debug("Delete data of %s in [%d, %d]", paths, start_time, end_time)
        req = ttypes.TSDeleteDataReq(
            sessionId=self.session_id,
            paths=list(paths),
            startTime=start_time,
            endTime=end_time,
        )
        self._request("deleteData", req)

    # Inserts

    def insert_record(
        self,
        device_id: str,
        timestamp: int,
        measurements: List[str],
        data_types: List[DataType],
        values: List[Any],
    ) -> None:
        logger.debug("Insert record into %s at %d", device_id, timestamp)
        req = ttypes.TSInsertRecordReq(
            sessionId=self.session_id,
            prefixPath=device_id,
            measurements=list(measurements),
            values=serialize_record_values(data_types, values),
            timestamp=timestamp,
        )
        self._request("insertRecord", req)

    def insert_string_record(
        self,
        device_id: str,
        timestamp: int,
        measurements: List[str],
        values: List[str],
    ) -> None:
        """Insert one record whose values the server parses from their string form."""
        logger.debug("Insert string record into %s at %d", device_id, timestamp)
        req = ttypes.TSInsertStringRecordReq(
            sessionId=self.session_id,
            prefixPath=device_id,
            measurements=list(measurements),
            values=[str(v) for v in values],
            timestamp=timestamp,
        )
        self._request("insertStringRecord", req)

    @staticmethod
    def _check_same_length(**lists):
        lengths = {len(v) for v in lists.values()}
        if len(lengths) > 1:
            raise ValueError(
                "{} must have the same length".format(", ".join(sorted(lists)))
            )

    def insert_records(
        self,
        device_ids: List[str],
        timestamps: List[int],
        measurements_list: List[List[str]],
        types_list: List[List[DataType]],
        values_list: List[List[Any]],
    ) -> None:
        logger.debug("Insert %d records", len(device_ids))
        self._check_same_length(
            device_ids=device_ids,
            timestamps=timestamps,
            measurements_list=measurements_list,
            types_list=types_list,
            values_list=values_list,
        )
        req = ttypes.TSInsertRecordsReq(
            sessionId=self.session_id,
            prefixPaths=list(device_ids),
            measurementsList=[list(m) for m in measurements_list],
            valuesList=[
                serialize_record_values(types, values)
                for (types, values) in zip(types_list, values_list)
            ],
            timestamps=list(timestamps),
        )
        self._request("insertRecords", req)

    def insert_records_of_one_device(
        self,
        device_id: str,
        timestamps: List[int],
        measurements_list: List[List[str]],
        types_list: List[List[DataType]],
        values_list: List[List[Any]],
    ) -> None:
        logger.debug("Insert %d records into %s", len(timestamps), device_id)
        self._check_same_length(
            timestamps=timestamps,
            measurements_list=measurements_list,
            types_list=types_list,
            values_list=values_list,
        )
        # The server expects the records of one device in time order
        order = sorted(range(len(timestamps)), key=lambda i: timestamps[i])
        req = ttypes.TSInsertRecordsOfOneDeviceReq(
            sessionId=self.session_id,
            prefixPath=device_id,
            measurementsList=[list(measurements_list[i]) for i in order],
            valuesList=[
                serialize_record_values(types_list[i], values_list[i]) for i in order
            ],
            timestamps=[timestamps[i] for i in order],
        )
        self._request("insertRecordsOfOneDevice", req)

    def insert_string_records(
        self,
        device_ids: List[str],
        timestamps: List[int],
        measurements_list: List[List[str]],
        values_list: List[List[str]],
    ) -> None:
        logger.debug("Insert %d string records", len(device_ids))
        self._check_same_length(
            device_ids=device_ids,
            timestamps=timestamps,
            measurements_list=measurements_list,
            values_list=values_list,
        )
        req = ttypes.TSInsertStringRecordsReq(
            sessionId=self.session_id,
            prefixPaths=list(device_ids),
            measurementsList=[list(m) for m in measurements_list],
            valuesList=[[str(v) for v in values] for values in values_list],
            timestamps=list(timestamps),
        )
        self._request("insertStringRecords", req)

    def insert_tablet(self, tablet: Tablet) -> None:
        logger.debug("Insert tablet of %d rows into %s", tablet.row_count, tablet.device_id)
        req = ttypes.TSInsertTabletReq(
            sessionId=self.session_id,
            prefixPath=tablet.device_id,
            measurements=tablet.measurements,
            values=tablet.get_binary_values(),
            timestamps=tablet.get_binary_timestamps(),
            types=[int(t) for t in tablet.data_types],
            size=tablet.row_count,
        )
        self._request("insertTablet", req)

    def insert_tablets(self, tablets: Sequence[Tablet]) -> None:
        logger.debug("Insert %d tablets", len(tablets))
        req = ttypes.TSInsertTabletsReq(
            sessionId=self.session_id,
            prefixPaths=[t.device_id for t in tablets],
            measurementsList=[t.measurements for t in tablets],
            valuesList=[t.get_binary_values() for t in tablets],
            timestampsList=[t.get_binary_timestamps() for t in tablets],
            typesList=[[int(d) for d in t.data_types] for t in tablets],
            sizeList=[t.row_count for t in tablets],
        )
        self._request("insertTablets", req)

    # Time zone and server properties

    def set_time_zone(self, zone_id: str) -> None:
        logger.debug("Set time zone %s", zone_id)
        req = ttypes.TSSetTimeZoneReq(sessionId=self.session_id, timeZone=zone_id)
        self._request("setTimeZone", req)
        self.zone_id = zone_id

    def get_time_zone(self) -> str:
        response = self._request("getTimeZone", self.session_id)
        return response.timeZone

    def get_properties(self) -> ttypes.ServerProperties:
        return self._request("getProperties")

    # Statements

    def _statement_request(self, statement: str) -> ttypes.TSExecuteStatementReq:
        return ttypes.TSExecuteStatementReq(
            sessionId=self.session_id,
            statement=statement,
            statementId=self.statement_id,
            fetchSize=self.config.fetch_size,
            timeout=self.config.timeout,
            enableRedirectQuery=self.config.enable_redirect,
            isAlign=True,
        )

    def _execute(self, method_name: str, statement: str) -> DataSet:
        logger.debug("Execute %s: %s", method_name, statement)
        response = self._request(method_name, self._statement_request(statement))
        return DataSet.from_execute_response(statement, response)

    def query(self, sql: str) -> DataSet:
        """Run any statement and decode its result, which is empty for non-queries."""
        return self._execute("executeStatement", sql)

    def exec_query(self, sql: str) -> DataSet:
        return self._execute("executeQueryStatement", sql)

    def exec_update(self, sql: str) -> DataSet:
        return self._execute("executeUpdateStatement", sql)

    def exec_raw_data_query(
        self, paths: List[str], start_time: int, end_time: int
    ) -> DataSet:
        """Read the raw points of ``paths`` with start_time <= time < end_time."""
        logger.debug("Raw data query of %s in [%d, %d)", paths, start_time, end_time)
        req = ttypes.TSRawDataQueryReq(
            sessionId=self.session_id,
            paths=list(paths),
            fetchSize=self.config.fetch_size,
            startTime=start_time,
            endTime=end_time,
            statementId=self.statement_id,
            enableRedirectQuery=self.config.enable_redirect,
        )
        response = self._request("executeRawDataQuery", req)
        statement = "raw data query of {} in [{}, {})".format(
            ", ".join(paths), start_time, end_time
        )
        return DataSet.from_execute_response(statement, response)

    def cancel_operation(self, query_id: int) -> None:
        logger.debug("Cancel query %s", query_id)
        req = ttypes.TSCancelOperationReq(sessionId=self.session_id, queryId=query_id)
        self._request("cancelOperation", req)
