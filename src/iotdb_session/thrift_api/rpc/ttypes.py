"""
Thrift structs for the TSIService RPC contracts described in thrift/rpc.thrift.

Every struct derives from ``thrift.protocol.TBase.TBase`` and only declares its
``thrift_spec``; reading and writing is done generically by the protocol
classes of the ``thrift`` library.
"""

from thrift.Thrift import TType
from thrift.protocol.TBase import TBase


class TSProtocolVersion(object):
    IOTDB_SERVICE_PROTOCOL_V1 = 0
    IOTDB_SERVICE_PROTOCOL_V2 = 1
    IOTDB_SERVICE_PROTOCOL_V3 = 2

    _VALUES_TO_NAMES = {
        0: "IOTDB_SERVICE_PROTOCOL_V1",
        1: "IOTDB_SERVICE_PROTOCOL_V2",
        2: "IOTDB_SERVICE_PROTOCOL_V3",
    }

    _NAMES_TO_VALUES = {
        "IOTDB_SERVICE_PROTOCOL_V1": 0,
        "IOTDB_SERVICE_PROTOCOL_V2": 1,
        "IOTDB_SERVICE_PROTOCOL_V3": 2,
    }


class TStruct(TBase):
    """Keyword-constructible struct whose fields are taken from ``thrift_spec``."""

    thrift_spec = ()

    def __init__(self, **kwargs):
        for field in self._fields():
            setattr(self, field[2], kwargs.pop(field[2], field[4]))
        if kwargs:
            raise TypeError(
                "{} got unexpected fields: {}".format(
                    self.__class__.__name__, ", ".join(sorted(kwargs))
                )
            )

    @classmethod
    def _fields(cls):
        return [field for field in cls.thrift_spec if field is not None]

    def __repr__(self):
        values = [
            "%s=%r" % (field[2], getattr(self, field[2])) for field in self._fields()
        ]
        return "%s(%s)" % (self.__class__.__name__, ", ".join(values))

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return all(
            getattr(self, field[2]) == getattr(other, field[2])
            for field in self._fields()
        )

    def __ne__(self, other):
        return not (self == other)

    __hash__ = None


class EndPoint(TStruct):
    pass


class TSStatus(TStruct):
    pass


class TSQueryDataSet(TStruct):
    pass


class TSExecuteStatementResp(TStruct):
    pass


class TSOpenSessionResp(TStruct):
    pass


class TSOpenSessionReq(TStruct):
    pass


class TSCloseSessionReq(TStruct):
    pass


class TSExecuteStatementReq(TStruct):
    pass


class TSRawDataQueryReq(TStruct):
    pass


class TSCancelOperationReq(TStruct):
    pass


class TSGetTimeZoneResp(TStruct):
    pass


class TSSetTimeZoneReq(TStruct):
    pass


class TSInsertRecordReq(TStruct):
    pass


class TSInsertStringRecordReq(TStruct):
    pass


class TSInsertTabletReq(TStruct):
    pass


class TSInsertTabletsReq(TStruct):
    pass


class TSInsertRecordsReq(TStruct):
    pass


class TSInsertRecordsOfOneDeviceReq(TStruct):
    pass


class TSInsertStringRecordsReq(TStruct):
    pass


class TSDeleteDataReq(TStruct):
    pass


class TSCreateTimeseriesReq(TStruct):
    pass


class TSCreateMultiTimeseriesReq(TStruct):
    pass


class ServerProperties(TStruct):
    pass


_STRING_LIST = (TType.STRING, "UTF8", False)
_STRING_MAP = (TType.STRING, "UTF8", TType.STRING, "UTF8", False)

EndPoint.thrift_spec = (
    None,
    (1, TType.STRING, "ip", "UTF8", None),
    (2, TType.I32, "port", None, None),
)
TSStatus.thrift_spec = (
    None,
    (1, TType.I32, "code", None, None),
    (2, TType.STRING, "message", "UTF8", None),
    (3, TType.LIST, "subStatus", (TType.STRUCT, [TSStatus, None], False), None),
    (4, TType.STRUCT, "redirectNode", [EndPoint, None], None),
)
TSQueryDataSet.thrift_spec = (
    None,
    (1, TType.STRING, "time", "BINARY", None),
    (2, TType.LIST, "valueList", (TType.STRING, "BINARY", False), None),
    (3, TType.LIST, "bitmapList", (TType.STRING, "BINARY", False), None),
)
TSExecuteStatementResp.thrift_spec = (
    None,
    (1, TType.STRUCT, "status", [TSStatus, None], None),
    (2, TType.I64, "queryId", None, None),
    (3, TType.LIST, "columns", _STRING_LIST, None),
    (4, TType.STRING, "operationType", "UTF8", None),
    (5, TType.BOOL, "ignoreTimeStamp", None, None),
    (6, TType.LIST, "dataTypeList", _STRING_LIST, None),
    (7, TType.STRUCT, "queryDataSet", [TSQueryDataSet, None], None),
    None,
    (
        9,
        TType.MAP,
        "columnNameIndexMap",
        (TType.STRING, "UTF8", TType.I32, None, False),
        None,
    ),
)
TSOpenSessionResp.thrift_spec = (
    None,
    (1, TType.STRUCT, "status", [TSStatus, None], None),
    (
        2,
        TType.I32,
        "serverProtocolVersion",
        None,
        TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V1,
    ),
    (3, TType.I64, "sessionId", None, None),
    (4, TType.MAP, "configuration", _STRING_MAP, None),
)
TSOpenSessionReq.thrift_spec = (
    None,
    (
        1,
        TType.I32,
        "client_protocol",
        None,
        TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V3,
    ),
    (2, TType.STRING, "zoneId", "UTF8", None),
    (3, TType.STRING, "username", "UTF8", None),
    (4, TType.STRING, "password", "UTF8", None),
    (5, TType.MAP, "configuration", _STRING_MAP, None),
)
TSCloseSessionReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
)
TSExecuteStatementReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "statement", "UTF8", None),
    (3, TType.I64, "statementId", None, None),
    (4, TType.I32, "fetchSize", None, None),
    (5, TType.I64, "timeout", None, None),
    (6, TType.BOOL, "enableRedirectQuery", None, None),
    (7, TType.BOOL, "isAlign", None, None),
)
TSRawDataQueryReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.LIST, "paths", _STRING_LIST, None),
    (3, TType.I32, "fetchSize", None, None),
    (4, TType.I64, "startTime", None, None),
    (5, TType.I64, "endTime", None, None),
    (6, TType.I64, "statementId", None, None),
    (7, TType.BOOL, "enableRedirectQuery", None, None),
)
TSCancelOperationReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.I64, "queryId", None, None),
)
TSGetTimeZoneResp.thrift_spec = (
    None,
    (1, TType.STRUCT, "status", [TSStatus, None], None),
    (2, TType.STRING, "timeZone", "UTF8", None),
)
TSSetTimeZoneReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "timeZone", "UTF8", None),
)
TSInsertRecordReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "prefixPath", "UTF8", None),
    (3, TType.LIST, "measurements", _STRING_LIST, None),
    (4, TType.STRING, "values", "BINARY", None),
    (5, TType.I64, "timestamp", None, None),
    (6, TType.BOOL, "isAligned", None, None),
)
TSInsertStringRecordReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "prefixPath", "UTF8", None),
    (3, TType.LIST, "measurements", _STRING_LIST, None),
    (4, TType.LIST, "values", _STRING_LIST, None),
    (5, TType.I64, "timestamp", None, None),
    (6, TType.BOOL, "isAligned", None, None),
)
TSInsertTabletReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "prefixPath", "UTF8", None),
    (3, TType.LIST, "measurements", _STRING_LIST, None),
    (4, TType.STRING, "values", "BINARY", None),
    (5, TType.STRING, "timestamps", "BINARY", None),
    (6, TType.LIST, "types", (TType.I32, None, False), None),
    (7, TType.I32, "size", None, None),
    (8, TType.BOOL, "isAligned", None, None),
)
TSInsertTabletsReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.LIST, "prefixPaths", _STRING_LIST, None),
    (3, TType.LIST, "measurementsList", (TType.LIST, _STRING_LIST, False), None),
    (4, TType.LIST, "valuesList", (TType.STRING, "BINARY", False), None),
    (5, TType.LIST, "timestampsList", (TType.STRING, "BINARY", False), None),
    (
        6,
        TType.LIST,
        "typesList",
        (TType.LIST, (TType.I32, None, False), False),
        None,
    ),
    (7, TType.LIST, "sizeList", (TType.I32, None, False), None),
    (8, TType.BOOL, "isAligned", None, None),
)
TSInsertRecordsReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.LIST, "prefixPaths", _STRING_LIST, None),
    (3, TType.LIST, "measurementsList", (TType.LIST, _STRING_LIST, False), None),
    (4, TType.LIST, "valuesList", (TType.STRING, "BINARY", False), None),
    (5, TType.LIST, "timestamps", (TType.I64, None, False), None),
    (6, TType.BOOL, "isAligned", None, None),
)
TSInsertRecordsOfOneDeviceReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "prefixPath", "UTF8", None),
    (3, TType.LIST, "measurementsList", (TType.LIST, _STRING_LIST, False), None),
    (4, TType.LIST, "valuesList", (TType.STRING, "BINARY", False), None),
    (5, TType.LIST, "timestamps", (TType.I64, None, False), None),
    (6, TType.BOOL, "isAligned", None, None),
)
TSInsertStringRecordsReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.LIST, "prefixPaths", _STRING_LIST, None),
    (3, TType.LIST, "measurementsList", (TType.LIST, _STRING_LIST, False), None),
    (4, TType.LIST, "valuesList", (TType.LIST, _STRING_LIST, False), None),
    (5, TType.LIST, "timestamps", (TType.I64, None, False), None),
    (6, TType.BOOL, "isAligned", None, None),
)
TSDeleteDataReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.LIST, "paths", _STRING_LIST, None),
    (3, TType.I64, "startTime", None, None),
    (4, TType.I64, "endTime", None, None),
)
TSCreateTimeseriesReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.STRING, "path", "UTF8", None),
    (3, TType.I32, "dataType", None, None),
    (4, TType.I32, "encoding", None, None),
    (5, TType.I32, "compressor", None, None),
    (6, TType.MAP, "props", _STRING_MAP, None),
    (7, TType.MAP, "tags", _STRING_MAP, None),
    (8, TType.MAP, "attributes", _STRING_MAP, None),
    (9, TType.STRING, "measurementAlias", "UTF8", None),
)
TSCreateMultiTimeseriesReq.thrift_spec = (
    None,
    (1, TType.I64, "sessionId", None, None),
    (2, TType.LIST, "paths", _STRING_LIST, None),
    (3, TType.LIST, "dataTypes", (TType.I32, None, False), None),
    (4, TType.LIST, "encodings", (TType.I32, None, False), None),
    (5, TType.LIST, "compressors", (TType.I32, None, False), None),
    (6, TType.LIST, "propsList", (TType.MAP, _STRING_MAP, False), None),
    (7, TType.LIST, "tagsList", (TType.MAP, _STRING_MAP, False), None),
    (8, TType.LIST, "attributesList", (TType.MAP, _STRING_MAP, False), None),
    (9, TType.LIST, "measurementAliasList", _STRING_LIST, None),
)
ServerProperties.thrift_spec = (
    None,
    (1, TType.STRING, "version", "UTF8", None),
    (2, TType.LIST, "supportedTimeAggregationOperations", _STRING_LIST, None),
    (3, TType.STRING, "timestampPrecision", "UTF8", None),
    (4, TType.I32, "maxConcurrentClientNum", None, None),
    (5, TType.I32, "thriftMaxFrameSize", None, None),
)
