from iotdb_session.exc import *
from iotdb_session.config import Config, ConfigBuilder, Endpoint
from iotdb_session.data_set import DataSet
from iotdb_session.session import Session, SessionState
from iotdb_session.tablet import Tablet
from iotdb_session.types import Compressor, DataType, Encoding, Field, RowRecord

__version__ = "0.1.0"


def connect(**kwargs):
    """Open a Session. Accepts the Config fields, plus ``host``/``port``."""
    return Session(Config.from_kwargs(**kwargs)).open()
