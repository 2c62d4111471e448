import logging
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from dateutil import tz

from iotdb_session.thrift_api.rpc import ttypes

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6667
DEFAULT_USER = "root"
DEFAULT_PASSWORD = "root"
DEFAULT_FETCH_SIZE = 1024
DEFAULT_PROTOCOL_VERSION = ttypes.TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V3


def local_zone_id() -> str:
    """Return the local UTC offset formatted the way the server expects it, e.g. "+08:00"."""
    offset = datetime.now(tz.tzlocal()).strftime("%z") or "+0000"
    return "{}:{}".format(offset[:3], offset[3:5])


@dataclass(frozen=True)
class Endpoint:
    host: str
    port: int

    @classmethod
    def parse(cls, address: str) -> "Endpoint":
        """Build an Endpoint from a ``host:port`` string."""
        host, sep, port = (address or "").strip().rpartition(":")
        if not sep or not host:
            raise ValueError(
                "Invalid endpoint {!r}: expected 'host:port'".format(address)
            )
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(
                "Invalid endpoint {!r}: port must be in 1..65535".format(address)
            )
        return cls(host, int(port))

    def __str__(self):
        return "{}:{}".format(self.host, self.port)


@dataclass(frozen=True)
class Config:
    """
    Everything a Session needs to connect and authenticate.

    Parameters:
        :param endpoint: Server address.
        :param user: User name sent with the open session request.
        :param password: Password sent with the open session request.
        :param zone_id: Session time zone, e.g. "+08:00" or "Asia/Shanghai".
            Defaults to the local UTC offset.
        :param fetch_size: Number of rows the server should put in one result batch.
        :param timeout: Query timeout in milliseconds. Also used as the socket timeout.
            None means no timeout is sent and the socket blocks indefinitely.
        :param rpc_compaction: Use the Thrift compact protocol instead of the binary one.
        :param protocol_version: The TSProtocolVersion requested from the server. The server
            must announce the same version or opening the session fails.
        :param enable_redirect: Ask the server to allow query redirection.
        :param configuration: Extra session configuration sent with the open request.
    """

    endpoint: Endpoint = Endpoint(DEFAULT_HOST, DEFAULT_PORT)
    user: str = DEFAULT_USER
    password: str = DEFAULT_PASSWORD
    zone_id: str = field(default_factory=local_zone_id)
    fetch_size: int = DEFAULT_FETCH_SIZE
    timeout: Optional[int] = None
    rpc_compaction: bool = False
    protocol_version: int = DEFAULT_PROTOCOL_VERSION
    enable_redirect: bool = False
    configuration: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        if isinstance(self.endpoint, str):
            object.__setattr__(self, "endpoint", Endpoint.parse(self.endpoint))
        if self.fetch_size <= 0:
            raise ValueError(
                "fetch_size must be positive, got {}".format(self.fetch_size)
            )
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must not be negative, got {}".format(self.timeout))
        if self.protocol_version not in ttypes.TSProtocolVersion._VALUES_TO_NAMES:
            raise ValueError(
                "Unknown protocol version {}".format(self.protocol_version)
            )
        object.__setattr__(
            self,
            "configuration",
            MappingProxyType(
                {str(k): str(v) for (k, v) in dict(self.configuration).items()}
            ),
        )

    @classmethod
    def builder(cls) -> "ConfigBuilder":
        return ConfigBuilder()

    @classmethod
    def from_kwargs(cls, **kwargs) -> "Config":
        """
        Build a Config from keyword arguments. ``host`` and ``port`` may be given instead
        of ``endpoint``; ``session_configuration`` is accepted as an alias of
        ``configuration``.
        """
        host = kwargs.pop("host", None)
        port = kwargs.pop("port", None)
        if host is not None or port is not None:
            if "endpoint" in kwargs:
                raise ValueError("Pass either endpoint or host/port, not both")
            kwargs["endpoint"] = Endpoint(host or DEFAULT_HOST, int(port or DEFAULT_PORT))
        if "session_configuration" in kwargs:
            kwargs["configuration"] = kwargs.pop("session_configuration") or {}
        return cls(**kwargs)


class ConfigBuilder:
    """
    Accumulates settings and produces a Config.

    Example:
        config = (
            ConfigBuilder()
            .endpoint("127.0.0.1:6667")
            .user("root")
            .password("root")
            .config("caller", "sensor-gateway")
            .build()
        )
    """

    def __init__(self):
        self._settings: Dict[str, Any] = {}
        self._configuration: Dict[str, str] = {}

    def endpoint(self, address) -> "ConfigBuilder":
        self._settings["endpoint"] = (
            address if isinstance(address, Endpoint) else Endpoint.parse(address)
        )
        return self

    def user(self, user: str) -> "ConfigBuilder":
        self._settings["user"] = user
        return self

    def password(self, password: str) -> "ConfigBuilder":
        self._settings["password"] = password
        return self

    def zone_id(self, zone_id: str) -> "ConfigBuilder":
        self._settings["zone_id"] = zone_id
        return self

    def fetch_size(self, fetch_size: int) -> "ConfigBuilder":
        self._settings["fetch_size"] = fetch_size
        return self

    def timeout(self, timeout: Optional[int]) -> "ConfigBuilder":
        self._settings["timeout"] = timeout
        return self

    def enable_rpc_compaction(self, enabled: bool = True) -> "ConfigBuilder":
        self._settings["rpc_compaction"] = enabled
        return self

    def protocol_version(self, protocol_version: int) -> "ConfigBuilder":
        self._settings["protocol_version"] = protocol_version
        return self

    def enable_redirect(self, enabled: bool = True) -> "ConfigBuilder":
        self._settings["enable_redirect"] = enabled
        return self

    def config(self, key: str, value: str) -> "ConfigBuilder":
        self._configuration[key] = value
        return self

    def config_map(self, mapping: Mapping[str, str]) -> "ConfigBuilder":
        self._configuration.update(mapping)
        return self

    def build(self) -> Config:
        config = Config(configuration=dict(self._configuration), **self._settings)
        logger.debug("Built session config for %s as %s", config.endpoint, config.user)
        return config
