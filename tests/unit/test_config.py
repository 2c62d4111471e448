import re

import pytest

from iotdb_session.config import Config, ConfigBuilder, Endpoint, local_zone_id
from iotdb_session.thrift_api.rpc.ttypes import TSProtocolVersion


class TestEndpoint:
    def test_parse_host_and_port(self):
        endpoint = Endpoint.parse("127.0.0.1:6667")
        assert endpoint == Endpoint("127.0.0.1", 6667)
        assert str(endpoint) == "127.0.0.1:6667"

    def test_parse_bracketed_ipv6(self):
        assert Endpoint.parse("[::1]:6667") == Endpoint("::1", 6667)

    @pytest.mark.parametrize(
        "address", ["localhost", ":6667", "host:", "host:abc", "host:0", "host:65536", ""]
    )
    def test_parse_rejects_malformed_addresses(self, address):
        with pytest.raises(ValueError):
            Endpoint.parse(address)

    def test_endpoint_is_immutable(self):
        endpoint = Endpoint("h", 1)
        with pytest.raises(AttributeError):
            endpoint.port = 2


class TestConfig:
    def test_defaults(self):
        config = Config()

        assert config.endpoint == Endpoint("127.0.0.1", 6667)
        assert config.user == "root"
        assert config.password == "root"
        assert config.fetch_size == 1024
        assert config.timeout is None
        assert config.rpc_compaction is False
        assert config.protocol_version == TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V3
        assert config.enable_redirect is False
        assert dict(config.configuration) == {}

    def test_local_zone_id_is_an_utc_offset(self):
        assert re.match(r"^[+-]\d\d:\d\d$", local_zone_id())
        assert re.match(r"^[+-]\d\d:\d\d$", Config().zone_id)

    def test_endpoint_string_is_parsed(self):
        assert Config(endpoint="db:1234").endpoint == Endpoint("db", 1234)

    def test_invalid_values_are_rejected(self):
        with pytest.raises(ValueError):
            Config(fetch_size=0)
        with pytest.raises(ValueError):
            Config(timeout=-1)
        with pytest.raises(ValueError):
            Config(protocol_version=42)

    def test_configuration_is_read_only(self):
        config = Config(configuration={"a": 1})
        assert dict(config.configuration) == {"a": "1"}
        with pytest.raises(TypeError):
            config.configuration["b"] = "2"

    def test_from_kwargs_accepts_host_and_port(self):
        config = Config.from_kwargs(host="db", port=7000, user="u", fetch_size=10)
        assert config.endpoint == Endpoint("db", 7000)
        assert config.user == "u"
        assert config.fetch_size == 10

    def test_from_kwargs_rejects_endpoint_with_host(self):
        with pytest.raises(ValueError):
            Config.from_kwargs(host="db", endpoint="other:1")

    def test_from_kwargs_session_configuration_alias(self):
        config = Config.from_kwargs(session_configuration={"k": "v"})
        assert dict(config.configuration) == {"k": "v"}


class TestConfigBuilder:
    def test_build_collects_every_setting(self):
        config = (
            ConfigBuilder()
            .endpoint("10.0.0.1:6668")
            .user("admin")
            .password("secret")
            .zone_id("+08:00")
            .fetch_size(50)
            .timeout(3000)
            .enable_rpc_compaction()
            .protocol_version(TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V2)
            .enable_redirect()
            .build()
        )

        assert config.endpoint == Endpoint("10.0.0.1", 6668)
        assert config.user == "admin"
        assert config.password == "secret"
        assert config.zone_id == "+08:00"
        assert config.fetch_size == 50
        assert config.timeout == 3000
        assert config.rpc_compaction is True
        assert config.protocol_version == TSProtocolVersion.IOTDB_SERVICE_PROTOCOL_V2
        assert config.enable_redirect is True
        assert dict(config.configuration) == {}

    def test_config_entries_persist(self):
        config = (
            Config.builder()
            .config("a", "1")
            .config_map({"b": "2", "c": "3"})
            .config("a", "4")
            .build()
        )
        assert dict(config.configuration) == {"a": "4", "b": "2", "c": "3"}

    def test_invalid_endpoint_fails_early(self):
        with pytest.raises(ValueError):
            ConfigBuilder().endpoint("no-port")

    def test_invalid_fetch_size_fails_on_build(self):
        with pytest.raises(ValueError):
            ConfigBuilder().fetch_size(0).build()
