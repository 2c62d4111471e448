"""
Synchronous client for the TSIService described in thrift/rpc.thrift.

Each RPC method sends a CALL message carrying an ``<method>_args`` struct and
blocks until the matching REPLY (or an application exception) is read back.
"""

from thrift.Thrift import TApplicationException, TMessageType, TType

from iotdb_session.thrift_api.rpc.ttypes import (
    TStruct,
    TSStatus,
    TSExecuteStatementResp,
    TSOpenSessionResp,
    TSOpenSessionReq,
    TSCloseSessionReq,
    TSExecuteStatementReq,
    TSRawDataQueryReq,
    TSCancelOperationReq,
    TSGetTimeZoneResp,
    TSSetTimeZoneReq,
    TSInsertRecordReq,
    TSInsertStringRecordReq,
    TSInsertTabletReq,
    TSInsertTabletsReq,
    TSInsertRecordsReq,
    TSInsertRecordsOfOneDeviceReq,
    TSInsertStringRecordsReq,
    TSDeleteDataReq,
    TSCreateTimeseriesReq,
    TSCreateMultiTimeseriesReq,
    ServerProperties,
)


def _struct_arg(fid, name, struct_class):
    return (fid, TType.STRUCT, name, [struct_class, None], None)


def _make_method_structs(method_name, arg_fields, success_field):
    """Build the ``<method>_args`` and ``<method>_result`` structs of one RPC."""
    args_spec = [None] * (max([field[0] for field in arg_fields] or [0]) + 1)
    for field in arg_fields:
        args_spec[field[0]] = field
    args_class = type(
        "{}_args".format(method_name), (TStruct,), {"thrift_spec": tuple(args_spec)}
    )
    result_class = type(
        "{}_result".format(method_name),
        (TStruct,),
        {"thrift_spec": ((0,) + success_field,)},
    )
    return args_class, result_class


_STATUS = (TType.STRUCT, "success", [TSStatus, None], None)
_EXECUTE_RESP = (TType.STRUCT, "success", [TSExecuteStatementResp, None], None)

_METHODS = {
    "openSession": (
        [_struct_arg(1, "req", TSOpenSessionReq)],
        (TType.STRUCT, "success", [TSOpenSessionResp, None], None),
    ),
    "closeSession": ([_struct_arg(1, "req", TSCloseSessionReq)], _STATUS),
    "executeStatement": (
        [_struct_arg(1, "req", TSExecuteStatementReq)],
        _EXECUTE_RESP,
    ),
    "executeQueryStatement": (
        [_struct_arg(1, "req", TSExecuteStatementReq)],
        _EXECUTE_RESP,
    ),
    "executeUpdateStatement": (
        [_struct_arg(1, "req", TSExecuteStatementReq)],
        _EXECUTE_RESP,
    ),
    "executeRawDataQuery": (
        [_struct_arg(1, "req", TSRawDataQueryReq)],
        _EXECUTE_RESP,
    ),
    "cancelOperation": ([_struct_arg(1, "req", TSCancelOperationReq)], _STATUS),
    "getTimeZone": (
        [(1, TType.I64, "sessionId", None, None)],
        (TType.STRUCT, "success", [TSGetTimeZoneResp, None], None),
    ),
    "setTimeZone": ([_struct_arg(1, "req", TSSetTimeZoneReq)], _STATUS),
    "getProperties": (
        [],
        (TType.STRUCT, "success", [ServerProperties, None], None),
    ),
    "setStorageGroup": (
        [
            (1, TType.I64, "sessionId", None, None),
            (2, TType.STRING, "storageGroup", "UTF8", None),
        ],
        _STATUS,
    ),
    "createTimeseries": ([_struct_arg(1, "req", TSCreateTimeseriesReq)], _STATUS),
    "createMultiTimeseries": (
        [_struct_arg(1, "req", TSCreateMultiTimeseriesReq)],
        _STATUS,
    ),
    "deleteTimeseries": (
        [
            (1, TType.I64, "sessionId", None, None),
            (2, TType.LIST, "path", (TType.STRING, "UTF8", False), None),
        ],
        _STATUS,
    ),
    "deleteStorageGroups": (
        [
            (1, TType.I64, "sessionId", None, None),
            (2, TType.LIST, "storageGroup", (TType.STRING, "UTF8", False), None),
        ],
        _STATUS,
    ),
    "insertRecord": ([_struct_arg(1, "req", TSInsertRecordReq)], _STATUS),
    "insertStringRecord": (
        [_struct_arg(1, "req", TSInsertStringRecordReq)],
        _STATUS,
    ),
    "insertTablet": ([_struct_arg(1, "req", TSInsertTabletReq)], _STATUS),
    "insertTablets": ([_struct_arg(1, "req", TSInsertTabletsReq)], _STATUS),
    "insertRecords": ([_struct_arg(1, "req", TSInsertRecordsReq)], _STATUS),
    "insertRecordsOfOneDevice": (
        [_struct_arg(1, "req", TSInsertRecordsOfOneDeviceReq)],
        _STATUS,
    ),
    "insertStringRecords": (
        [_struct_arg(1, "req", TSInsertStringRecordsReq)],
        _STATUS,
    ),
    "deleteData": ([_struct_arg(1, "req", TSDeleteDataReq)], _STATUS),
    "requestStatementId": (
        [(1, TType.I64, "sessionId", None, None)],
        (TType.I64, "success", None, None),
    ),
}

_METHOD_STRUCTS = {
    name: _make_method_structs(name, arg_fields, success_field)
    for name, (arg_fields, success_field) in _METHODS.items()
}


class Client(object):
    def __init__(self, iprot, oprot=None):
        self._iprot = self._oprot = iprot
        if oprot is not None:
            self._oprot = oprot
        self._seqid = 0

    def _call(self, method_name, **kwargs):
        args_class, result_class = _METHOD_STRUCTS[method_name]

        self._seqid += 1
        self._oprot.writeMessageBegin(method_name, TMessageType.CALL, self._seqid)
        args_class(**kwargs).write(self._oprot)
        self._oprot.writeMessageEnd()
        self._oprot.trans.flush()

        (fname, mtype, rseqid) = self._iprot.readMessageBegin()
        if mtype == TMessageType.EXCEPTION:
            x = TApplicationException()
            x.read(self._iprot)
            self._iprot.readMessageEnd()
            raise x
        result = result_class()
        result.read(self._iprot)
        self._iprot.readMessageEnd()
        if result.success is not None:
            return result.success
        raise TApplicationException(
            TApplicationException.MISSING_RESULT,
            "{} failed: unknown result".format(method_name),
        )

    def openSession(self, req):
        return self._call("openSession", req=req)

    def closeSession(self, req):
        return self._call("closeSession", req=req)

    def executeStatement(self, req):
        return self._call("executeStatement", req=req)

    def executeQueryStatement(self, req):
        return self._call("executeQueryStatement", req=req)

    def executeUpdateStatement(self, req):
        return self._call("executeUpdateStatement", req=req)

    def executeRawDataQuery(self, req):
        return self._call("executeRawDataQuery", req=req)

    def cancelOperation(self, req):
        return self._call("cancelOperation", req=req)

    def getTimeZone(self, sessionId):
        return self._call("getTimeZone", sessionId=sessionId)

    def setTimeZone(self, req):
        return self._call("setTimeZone", req=req)

    def getProperties(self):
        return self._call("getProperties")

    def setStorageGroup(self, sessionId, storageGroup):
        return self._call(
            "setStorageGroup", sessionId=sessionId, storageGroup=storageGroup
        )

    def createTimeseries(self, req):
        return self._call("createTimeseries", req=req)

    def createMultiTimeseries(self, req):
        return self._call("createMultiTimeseries", req=req)

    def deleteTimeseries(self, sessionId, path):
        return self._call("deleteTimeseries", sessionId=sessionId, path=path)

    def deleteStorageGroups(self, sessionId, storageGroup):
        return self._call(
            "deleteStorageGroups", sessionId=sessionId, storageGroup=storageGroup
        )

    def insertRecord(self, req):
        return self._call("insertRecord", req=req)

    def insertStringRecord(self, req):
        return self._call("insertStringRecord", req=req)

    def insertTablet(self, req):
        return self._call("insertTablet", req=req)

    def insertTablets(self, req):
        return self._call("insertTablets", req=req)

    def insertRecords(self, req):
        return self._call("insertRecords", req=req)

    def insertRecordsOfOneDevice(self, req):
        return self._call("insertRecordsOfOneDevice", req=req)

    def insertStringRecords(self, req):
        return self._call("insertStringRecords", req=req)

    def deleteData(self, req):
        return self._call("deleteData", req=req)

    def requestStatementId(self, sessionId):
        return self._call("requestStatementId", sessionId=sessionId)
