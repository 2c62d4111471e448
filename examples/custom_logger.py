import os
import logging

import iotdb_session

# Every RPC is logged at DEBUG by iotdb_session.thrift_backend ("Sending request ...",
# "Received response: ..."); the session logs open and close at INFO.
rpc_log = logging.getLogger("iotdb_session.thrift_backend")
rpc_log.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))
rpc_log.addHandler(handler)

logging.getLogger("iotdb_session.session").setLevel(logging.INFO)
logging.basicConfig(filename="iotdb_session.log", level=logging.WARNING)

with iotdb_session.connect(
    host=os.getenv("IOTDB_HOST", "127.0.0.1"),
    user=os.getenv("IOTDB_USER", "root"),
    password=os.getenv("IOTDB_PASSWORD", "root"),
) as session:
    # The failed status below shows up as an ERROR line from the backend logger
    # before the ServerOperationError reaches this code.
    try:
        session.query("SELECT * FROM root.does_not_exist")
    except iotdb_session.ServerOperationError as e:
        print("status {}: {}".format(e.status_code, e))
