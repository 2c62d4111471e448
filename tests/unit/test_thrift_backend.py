import unittest
from unittest.mock import patch, MagicMock

from thrift.Thrift import TException
from thrift.protocol.TCompactProtocol import TCompactProtocol
from thrift.protocol.TBinaryProtocol import TBinaryProtocol
from thrift.transport.TTransport import TTransportException

from iotdb_session.config import Endpoint
from iotdb_session.exc import (
    ProtocolVersionMismatchError,
    RequestError,
    ServerOperationError,
)
from iotdb_session.thrift_api.rpc import ttypes
from iotdb_session.thrift_backend import ThriftBackend, status_message

PACKAGE_NAME = "iotdb_session"
V3 = ttypes.TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V3


@patch("%s.thrift_backend.TSocket.TSocket" % PACKAGE_NAME)
@patch("%s.thrift_backend.TSIService.Client" % PACKAGE_NAME, autospec=True)
class ThriftBackendTestSuite(unittest.TestCase):
    okay_status = ttypes.TSStatus(code=200)

    bad_status = ttypes.TSStatus(code=301, message="this is a bad error")

    open_session_resp = ttypes.TSOpenSessionResp(
        status=okay_status, serverProtocolVersion=V3, sessionId=7
    )

    def _make_backend(self, **kwargs):
        return ThriftBackend(Endpoint("localhost", 6667), **kwargs)

    def _open(self, backend, protocol_version=V3):
        return backend.open_session("root", "root", "+08:00", protocol_version, {"k": "v"})

    def test_make_request_checks_status_code(self, client_class, socket_class):
        client_class.return_value.setStorageGroup.return_value = self.bad_status
        backend = self._make_backend()

        with self.assertRaises(ServerOperationError) as cm:
            backend.make_request("setStorageGroup", 7, "root.sg", session_id=7)

        self.assertEqual(str(cm.exception), "this is a bad error")
        self.assertEqual(cm.exception.status_code, 301)
        self.assertEqual(cm.exception.context["method"], "setStorageGroup")

    def test_make_request_checks_status_of_rich_responses(self, client_class, socket_class):
        client_class.return_value.executeStatement.return_value = (
            ttypes.TSExecuteStatementResp(status=self.bad_status)
        )
        backend = self._make_backend()

        with self.assertRaises(ServerOperationError):
            backend.make_request("executeStatement", MagicMock())

    def test_make_request_returns_successful_responses(self, client_class, socket_class):
        resp = ttypes.TSGetTimeZoneResp(status=self.okay_status, timeZone="+08:00")
        client_class.return_value.getTimeZone.return_value = resp
        backend = self._make_backend()

        self.assertIs(backend.make_request("getTimeZone", 7), resp)

    def test_values_without_status_pass_through(self, client_class, socket_class):
        client_class.return_value.requestStatementId.return_value = 3
        backend = self._make_backend()

        self.assertEqual(backend.request_statement_id(7), 3)

    def test_transport_errors_become_request_errors(self, client_class, socket_class):
        backend = self._make_backend()
        for error in [TException("boom"), OSError("reset"), TTransportException(message="eof")]:
            client_class.return_value.deleteData.side_effect = error

            with self.assertRaises(RequestError) as cm:
                backend.make_request("deleteData", MagicMock(), session_id=7)

            self.assertIs(cm.exception.context["original-exception"], error)
            self.assertEqual(cm.exception.context["method"], "deleteData")
            self.assertEqual(cm.exception.context["session-id"], 7)

    def test_open_session_sends_credentials_and_configuration(self, client_class, socket_class):
        client_class.return_value.openSession.return_value = self.open_session_resp
        backend = self._make_backend()

        resp = self._open(backend)

        self.assertEqual(resp.sessionId, 7)
        socket_class.return_value.open.assert_called_once()
        req = client_class.return_value.openSession.call_args[0][0]
        self.assertEqual(req.username, "root")
        self.assertEqual(req.password, "root")
        self.assertEqual(req.zoneId, "+08:00")
        self.assertEqual(req.client_protocol, V3)
        self.assertEqual(req.configuration, {"k": "v"})

    def test_bad_protocol_versions_are_rejected(self, client_class, socket_class):
        bad_protocol_versions = [
            ttypes.TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V1,
            ttypes.TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V2,
        ]

        client_class.return_value.closeSession.return_value = self.okay_status
        for protocol_version in bad_protocol_versions:
            client_class.return_value.openSession.return_value = ttypes.TSOpenSessionResp(
                status=self.okay_status,
                serverProtocolVersion=protocol_version,
                sessionId=7,
            )
            backend = self._make_backend()

            with self.assertRaises(ProtocolVersionMismatchError) as cm:
                self._open(backend)

            self.assertIn("Protocol version is different", str(cm.exception))
            self.assertEqual(cm.exception.context["server-protocol-version"], protocol_version)
            close_req = client_class.return_value.closeSession.call_args[0][0]
            self.assertEqual(close_req.sessionId, 7)
            socket_class.return_value.close.assert_called()
            socket_class.return_value.close.reset_mock()
            client_class.return_value.closeSession.reset_mock()

    def test_abandon_session_ignores_close_failures(self, client_class, socket_class):
        close_session = client_class.return_value.closeSession
        backend = self._make_backend()

        close_session.return_value = self.bad_status
        backend.abandon_session(7)
        socket_class.return_value.close.assert_called_once()

        close_session.side_effect = TTransportException(message="eof")
        backend.abandon_session(7)
        self.assertEqual(close_session.call_count, 2)
        self.assertEqual(socket_class.return_value.close.call_count, 2)

    def test_failed_open_does_not_try_to_close_a_session(self, client_class, socket_class):
        client_class.return_value.openSession.side_effect = TTransportException(
            message="eof"
        )
        backend = self._make_backend()

        with self.assertRaises(RequestError):
            self._open(backend)
        client_class.return_value.closeSession.assert_not_called()
        socket_class.return_value.close.assert_called_once()

    def test_okay_protocol_version_succeeds(self, client_class, socket_class):
        client_class.return_value.openSession.return_value = ttypes.TSOpenSessionResp(
            status=self.okay_status,
            serverProtocolVersion=ttypes.TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V2,
            sessionId=7,
        )
        backend = self._make_backend()

        self._open(backend, ttypes.TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V2)

        socket_class.return_value.close.assert_not_called()

    def test_rejected_open_closes_the_transport(self, client_class, socket_class):
        client_class.return_value.openSession.return_value = ttypes.TSOpenSessionResp(
            status=self.bad_status, serverProtocolVersion=V3
        )
        backend = self._make_backend()

        with self.assertRaises(ServerOperationError):
            self._open(backend)
        socket_class.return_value.close.assert_called_once()

    def test_unreachable_server_raises_request_error(self, client_class, socket_class):
        socket_class.return_value.open.side_effect = TTransportException(
            TTransportException.NOT_OPEN, "Could not connect"
        )
        backend = self._make_backend()

        with self.assertRaises(RequestError):
            self._open(backend)
        client_class.return_value.openSession.assert_not_called()

    def test_failed_close_keeps_the_transport_open(self, client_class, socket_class):
        client_class.return_value.closeSession.return_value = self.bad_status
        backend = self._make_backend()

        with self.assertRaises(ServerOperationError):
            backend.close_session(7)
        socket_class.return_value.close.assert_not_called()

        client_class.return_value.closeSession.return_value = self.okay_status
        backend.close_session(7)
        socket_class.return_value.close.assert_called_once()
        req = client_class.return_value.closeSession.call_args[0][0]
        self.assertEqual(req.sessionId, 7)

    def test_socket_timeout_is_propagated(self, client_class, socket_class):
        self._make_backend(timeout=1500)
        socket_class.return_value.setTimeout.assert_called_once_with(1500)

        socket_class.return_value.setTimeout.reset_mock()
        self._make_backend()
        socket_class.return_value.setTimeout.assert_not_called()

    def test_port_and_host_are_respected(self, client_class, socket_class):
        ThriftBackend(Endpoint("db.example.com", 6668))
        socket_class.assert_called_once_with("db.example.com", 6668)

    def test_protocol_is_chosen_by_compaction_flag(self, client_class, socket_class):
        self._make_backend()
        self.assertIsInstance(client_class.call_args[0][0], TBinaryProtocol)

        self._make_backend(rpc_compaction=True)
        self.assertIsInstance(client_class.call_args[0][0], TCompactProtocol)


class StatusMessageTests(unittest.TestCase):
    def test_message_is_used_verbatim(self):
        self.assertEqual(status_message(ttypes.TSStatus(code=400, message="x")), "x")

    def test_sub_status_messages_are_joined(self):
        status = ttypes.TSStatus(
            code=302,
            subStatus=[
                ttypes.TSStatus(code=200),
                ttypes.TSStatus(code=508, message="path not exist"),
                ttypes.TSStatus(code=507, message="type mismatch"),
            ],
        )
        self.assertEqual(status_message(status), "path not exist; type mismatch")

    def test_placeholder_when_no_message(self):
        self.assertEqual(status_message(ttypes.TSStatus(code=500)), "Unknown error")


if __name__ == "__main__":
    unittest.main()
