# rumble/test_parser.py
import unittest

from rumble.parser import Command, ParseError, format_command, parse_command


class TestParseCommand(unittest.TestCase):
    def test_basic(self):
        self.assertEqual(parse_command(b"0 30000 30000 500"), Command(0, 30000, 30000, 500))

    def test_round_trip_limits(self):
        for cmd in (Command(0, 0, 0, 0),
                    Command(3, 65535, 1, 4294967295),
                    Command(2147483647, 12345, 65535, 1)):
            self.assertEqual(parse_command(format_command(cmd).encode("ascii")), cmd)

    def test_whitespace_and_newline(self):
        self.assertEqual(parse_command(b"  1\t2  3 4\r\n"), Command(1, 2, 3, 4))

    def test_null_terminated_buffer(self):
        buf = bytearray(256)
        buf[:12] = b"1 100 200 10"
        self.assertEqual(parse_command(buf), Command(1, 100, 200, 10))

    def test_content_after_nul_ignored(self):
        self.assertEqual(parse_command(b"1 2 3 4\0garbage"), Command(1, 2, 3, 4))

    def test_trailing_tokens_ignored(self):
        self.assertEqual(parse_command(b"0 1 2 3 extra stuff 99"), Command(0, 1, 2, 3))

    def test_negative_index_parses(self):
        # bounds are the handler's job
        self.assertEqual(parse_command(b"-1 1 2 3").device_index, -1)

    def test_too_few_fields(self):
        for data in (b"", b"   ", b"0", b"0 1", b"0 1 2", b"\0 1 2 3"):
            with self.assertRaises(ParseError, msg=data):
                parse_command(data)

    def test_non_numeric(self):
        for data in (b"abc 1 2 3", b"0 x 2 3", b"0 1 2.5 3", b"0 1 2 3ms", b"0x1 1 2 3", b"0 1_000 2 3"):
            with self.assertRaises(ParseError, msg=data):
                parse_command(data)

    def test_out_of_range(self):
        for data in (b"0 65536 0 0", b"0 0 -1 0", b"0 0 0 4294967296",
                     b"0 0 0 -5", b"2147483648 0 0 0"):
            with self.assertRaises(ParseError, msg=data):
                parse_command(data)

    def test_non_ascii(self):
        with self.assertRaises(ParseError):
            parse_command("0 1 2 ３".encode("utf-8"))

    def test_non_ascii_after_four_fields_ignored(self):
        self.assertEqual(parse_command(b"0 30000 30000 500 \xff\xfe"), Command(0, 30000, 30000, 500))
        self.assertEqual(parse_command("0 1 2 3 café".encode("utf-8")), Command(0, 1, 2, 3))

    def test_parse_error_is_value_error(self):
        self.assertTrue(issubclass(ParseError, ValueError))


if __name__ == "__main__":
    unittest.main()
