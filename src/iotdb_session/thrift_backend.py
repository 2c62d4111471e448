import logging
import threading
from typing import Mapping, Optional

from thrift.Thrift import TException
from thrift.protocol import TBinaryProtocol, TCompactProtocol
from thrift.transport import TSocket, TTransport

from iotdb_session.config import Endpoint
from iotdb_session.exc import (
    DEFAULT_ERROR_MESSAGE,
    ProtocolVersionMismatchError,
    RequestError,
    ServerOperationError,
)
from iotdb_session.thrift_api.rpc import TSIService, ttypes

logger = logging.getLogger(__name__)

SUCCESS_STATUS = 200


def status_message(status: ttypes.TSStatus) -> str:
    """The diagnostic text of a failed status, falling back to its sub-statuses."""
    if status.message:
        return status.message
    sub_messages = [s.message for s in (status.subStatus or []) if s.message]
    if sub_messages:
        return "; ".join(sub_messages)
    return DEFAULT_ERROR_MESSAGE


class ThriftBackend:
    """
    One framed Thrift connection to the server.

    Requests are serialized with a lock, so at most one request is in flight on the
    connection. The wire protocol (binary or compact) is picked once, here.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        rpc_compaction: bool = False,
        timeout: Optional[int] = None,
    ):
        self.endpoint = endpoint
        socket = TSocket.TSocket(endpoint.host, endpoint.port)
        if timeout:
            socket.setTimeout(timeout)
        self._transport = TTransport.TFramedTransport(socket)
        if rpc_compaction:
            protocol = TCompactProtocol.TCompactProtocol(self._transport)
        else:
            protocol = TBinaryProtocol.TBinaryProtocol(self._transport)
        self._client = TSIService.Client(protocol)

        self._request_lock = threading.RLock()

    @staticmethod
    def _check_response_for_error(method_name, response, session_id=None):
        if isinstance(response, ttypes.TSStatus):
            status = response
        else:
            status = getattr(response, "status", None)
        if status is None or status.code == SUCCESS_STATUS:
            return
        message = status_message(status)
        logger.error("%s failed with status %s: %s", method_name, status.code, message)
        raise ServerOperationError(
            message,
            {
                "status-code": status.code,
                "method": method_name,
                "session-id": session_id,
            },
        )

    def make_request(self, method_name: str, *args, session_id=None):
        """
        Call one TSIService method and apply the status contract to its response.

        :raises RequestError: if the request could not be written or the response read
        :raises ServerOperationError: if the response carries a non-success status
        """
        with self._request_lock:
            logger.debug("Sending request %s", method_name)
            try:
                response = getattr(self._client, method_name)(*args)
            except (TException, OSError) as error:
                logger.info("Error during %s request: %s", method_name, error)
                raise RequestError(
                    "Error during Thrift request {}: {}".format(method_name, error),
                    {
                        "method": method_name,
                        "session-id": session_id,
                        "original-exception": error,
                    },
                ) from error
            logger.debug("Received response: %r", response)
            ThriftBackend._check_response_for_error(method_name, response, session_id)
            return response

    @staticmethod
    def _check_protocol_version(requested_version, t_open_session_resp):
        server_version = t_open_session_resp.serverProtocolVersion
        if server_version != requested_version:
            names = ttypes.TSProtocolVersion._VALUES_TO_NAMES
            message = "Protocol version is different, client is {}, server is {}".format(
                names.get(requested_version, requested_version),
                names.get(server_version, server_version),
            )
            logger.error(message)
            raise ProtocolVersionMismatchError(
                message,
                {
                    "client-protocol-version": requested_version,
                    "server-protocol-version": server_version,
                },
            )

    def open_session(
        self,
        user: str,
        password: str,
        zone_id: str,
        protocol_version: int,
        configuration: Mapping[str, str],
    ) -> ttypes.TSOpenSessionResp:
        """
        Connect and authenticate. The transport is closed again if anything fails, and a
        session opened with a mismatched protocol version is closed on the server first.
        """
        try:
            try:
                self._transport.open()
            except (TException, OSError) as error:
                raise RequestError(
                    "Could not connect to {}: {}".format(self.endpoint, error),
                    {"method": "openSession", "original-exception": error},
                ) from error
            open_session_req = ttypes.TSOpenSessionReq(
                client_protocol=protocol_version,
                zoneId=zone_id,
                username=user,
                password=password,
                configuration=dict(configuration),
            )
            response = self.make_request("openSession", open_session_req)
        except Exception:
            self.close_transport()
            raise
        try:
            self._check_protocol_version(protocol_version, response)
        except ProtocolVersionMismatchError:
            self.abandon_session(response.sessionId)
            raise
        return response

    def request_statement_id(self, session_id: int) -> int:
        return self.make_request("requestStatementId", session_id, session_id=session_id)

    def close_session(self, session_id: int) -> None:
        """
        Close the server side session. On failure the transport stays open so the
        close can be retried.
        """
        req = ttypes.TSCloseSessionReq(sessionId=session_id)
        self.make_request("closeSession", req, session_id=session_id)
        self.close_transport()

    def abandon_session(self, session_id: int) -> None:
        """Release a session the client will not use, then drop the transport."""
        req = ttypes.TSCloseSessionReq(sessionId=session_id)
        try:
            self.make_request("closeSession", req, session_id=session_id)
        except (RequestError, ServerOperationError) as error:
            logger.warning("Failed to close abandoned session %s: %s", session_id, error)
        self.close_transport()

    def close_transport(self):
        try:
            self._transport.close()
        except (TException, OSError) as error:
            logger.warning("Ignoring error while closing transport: %s", error)
