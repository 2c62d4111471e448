import os
import pytest


@pytest.fixture(scope="session")
def host():
    return os.getenv("IOTDB_HOST")


@pytest.fixture(scope="session")
def port():
    return int(os.getenv("IOTDB_PORT", "6667"))


@pytest.fixture(scope="session")
def user():
    return os.getenv("IOTDB_USER", "root")


@pytest.fixture(scope="session")
def password():
    return os.getenv("IOTDB_PASSWORD", "root")


@pytest.fixture(scope="session")
def connection_details(host, port, user, password):
    return {
        "host": host,
        "port": port,
        "user": user,
        "password": password,
    }
