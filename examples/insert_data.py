from iotdb_session import Compressor, Config, DataType, Encoding, Session, Tablet
import os

config = (
    Config.builder()
    .endpoint(os.getenv("IOTDB_ENDPOINT", "127.0.0.1:6667"))
    .user(os.getenv("IOTDB_USER", "root"))
    .password(os.getenv("IOTDB_PASSWORD", "root"))
    .fetch_size(1000)
    .build()
)

with Session(config) as session:
    session.set_storage_group("root.ln")
    session.create_time_series(
        "root.ln.wf01.wt01.temperature", DataType.FLOAT, Encoding.RLE, Compressor.SNAPPY
    )
    session.create_time_series(
        "root.ln.wf01.wt01.status", DataType.BOOLEAN, Encoding.PLAIN, Compressor.SNAPPY
    )

    session.insert_record(
        "root.ln.wf01.wt01",
        1,
        ["temperature", "status"],
        [DataType.FLOAT, DataType.BOOLEAN],
        [21.5, True],
    )

    readings = [[20.0 + i / 10, i % 2 == 0] for i in range(100)]
    tablet = Tablet(
        "root.ln.wf01.wt01",
        ["temperature", "status"],
        [DataType.FLOAT, DataType.BOOLEAN],
        readings,
        [1000 + i for i in range(100)],
    )
    session.insert_tablet(tablet)

    df = session.query("SELECT * FROM root.ln.wf01.wt01 LIMIT 10").to_pandas()
    print(df)

    session.delete_storage_group("root.ln")
