import setuptools

setuptools.setup(
    name="iotdb-session-client",
    version="0.1.0",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    python_requires=">=3.7",
    install_requires=["thrift>=0.13.0", "pyarrow", "pandas", "python-dateutil"],
    extras_require={"test": ["pytest"]},
    author="IoTDB session client contributors",
)
