import iotdb_session
import os

with iotdb_session.connect(
    host=os.getenv("IOTDB_HOST", "127.0.0.1"),
    port=int(os.getenv("IOTDB_PORT", "6667")),
    user=os.getenv("IOTDB_USER", "root"),
    password=os.getenv("IOTDB_PASSWORD", "root"),
) as session:

    data_set = session.query("SHOW TIMESERIES")
    print(data_set.column_names)

    for row in data_set:
        print(row.timestamp, [field.get_string_value() for field in row.fields])
