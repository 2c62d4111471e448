import unittest

from iotdb_session.exc import DecodeError, UnknownVariantError
from iotdb_session.types import Compressor, DataType, Encoding, Field, RowRecord


class CodedEnumTests(unittest.TestCase):
    def test_codes_round_trip(self):
        for enum_class in (DataType, Encoding, Compressor):
            for member in enum_class:
                self.assertIs(enum_class.from_code(int(member)), member)

    def test_server_agreed_codes(self):
        self.assertEqual([int(t) for t in DataType], [0, 1, 2, 3, 4, 5])
        self.assertEqual(int(Encoding.RLE), 2)
        self.assertEqual(int(Encoding.GORILLA), 8)
        self.assertEqual(int(Compressor.SNAPPY), 1)
        self.assertEqual(int(Compressor.LZ4), 7)

    def test_unknown_code_raises_typed_decode_error(self):
        with self.assertRaises(UnknownVariantError) as cm:
            DataType.from_code(6)
        self.assertIsInstance(cm.exception, DecodeError)
        self.assertEqual(cm.exception.code, 6)
        self.assertEqual(cm.exception.kind, "DataType")

        with self.assertRaises(UnknownVariantError):
            Encoding.from_code(9)
        with self.assertRaises(UnknownVariantError):
            Compressor.from_code(-1)

    def test_from_tag_accepts_codes_digits_and_names(self):
        self.assertIs(DataType.from_tag(3), DataType.FLOAT)
        self.assertIs(DataType.from_tag("3"), DataType.FLOAT)
        self.assertIs(DataType.from_tag("FLOAT"), DataType.FLOAT)
        self.assertIs(DataType.from_tag("text"), DataType.TEXT)

    def test_from_tag_rejects_unknown_tags(self):
        for tag in ("VARCHAR", "17", True, None, 2.0):
            with self.assertRaises(UnknownVariantError):
                DataType.from_tag(tag)


class FieldTests(unittest.TestCase):
    def test_only_the_matching_accessor_is_populated(self):
        field = Field(DataType.INT64, 42)

        self.assertEqual(field.long_value, 42)
        self.assertIsNone(field.int_value)
        self.assertIsNone(field.double_value)
        self.assertIsNone(field.binary_value)
        self.assertFalse(field.is_null)

    def test_absent_value_is_null(self):
        field = Field(DataType.DOUBLE)

        self.assertTrue(field.is_null)
        self.assertIsNone(field.get_object_value())
        self.assertEqual(field.get_string_value(), "null")

    def test_value_must_match_data_type(self):
        with self.assertRaises(TypeError):
            Field(DataType.BOOLEAN, 1)
        with self.assertRaises(TypeError):
            Field(DataType.INT32, True)
        with self.assertRaises(TypeError):
            Field(DataType.INT32, 1.5)
        with self.assertRaises(TypeError):
            Field(DataType.TEXT, "not bytes")
        with self.assertRaises(TypeError):
            Field(DataType.FLOAT, "1.5")

    def test_integer_ranges_are_checked(self):
        Field(DataType.INT32, 2**31 - 1)
        with self.assertRaises(ValueError):
            Field(DataType.INT32, 2**31)
        Field(DataType.INT64, -(2**63))
        with self.assertRaises(ValueError):
            Field(DataType.INT64, 2**63)

    def test_floats_accept_integers(self):
        self.assertEqual(Field(DataType.FLOAT, 2).float_value, 2.0)
        self.assertIsInstance(Field(DataType.DOUBLE, 2).double_value, float)

    def test_string_value(self):
        self.assertEqual(Field(DataType.BOOLEAN, True).get_string_value(), "true")
        self.assertEqual(Field(DataType.BOOLEAN, False).get_string_value(), "false")
        self.assertEqual(Field(DataType.INT32, -3).get_string_value(), "-3")
        self.assertEqual(
            Field(DataType.TEXT, "héllo".encode()).get_string_value(), "héllo"
        )
        self.assertEqual(str(Field(DataType.DOUBLE, 0.5)), "0.5")

    def test_equality_includes_the_data_type(self):
        self.assertEqual(Field(DataType.INT32, 1), Field(DataType.INT32, 1))
        self.assertNotEqual(Field(DataType.INT32, 1), Field(DataType.INT64, 1))
        self.assertEqual(len({Field(DataType.TEXT, b"a"), Field(DataType.TEXT, b"a")}), 1)


class RowRecordTests(unittest.TestCase):
    def test_fields_are_kept_in_column_order(self):
        row = RowRecord(1000)
        row.add_field(Field(DataType.FLOAT, 1.5))
        row.add_field(Field(DataType.TEXT))

        self.assertEqual(row.values(), [1.5, None])
        self.assertEqual(row[0].float_value, 1.5)
        self.assertTrue(row[1].is_null)

    def test_row_without_fields_is_still_a_row(self):
        row = RowRecord(5)
        self.assertTrue(row)
        self.assertEqual(row.fields, [])


if __name__ == "__main__":
    unittest.main()
