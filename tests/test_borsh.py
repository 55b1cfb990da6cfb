import base64
import unittest
from pathlib import Path

from solders.pubkey import Pubkey

from idlkit.borsh import (
    ArrayToken,
    BoolToken,
    IntToken,
    StringToken,
    TupleToken,
    UintToken,
    decode_at_offset,
    decode_return_value,
    encode_arguments,
    render_token,
)
from idlkit.errors import DecodeError, TypeNotFoundError, UnsupportedTypeError
from idlkit.idl import find_instruction, load_idl
from idlkit.output import decode_instruction_return_data, return_data_from_logs
from idlkit.types import Array, Bool, Bytes, Defined, Float, Int, PublicKey, String, Uint, Vec

CONTRACTS = Path(__file__).parent / "contracts"
PROGRAM = "F1ipperKF9EfD821ZbbYjS319LXYiBmjhzkkf5a26rC"


def _return_log(payload: bytes) -> str:
    return f"Program return: {PROGRAM} {base64.b64encode(payload).decode()}"


class EncodeTokenTests(unittest.TestCase):
    def test_layout(self) -> None:
        tokens = [
            BoolToken(True),
            UintToken(16, 0x0102),
            IntToken(8, -1),
            StringToken("hi"),
            ArrayToken([UintToken(8, 7), UintToken(8, 9)]),
            TupleToken([UintToken(8, 5), BoolToken(False)]),
        ]
        self.assertEqual(
            list(encode_arguments(tokens)),
            [1, 2, 1, 255, 2, 0, 0, 0, 104, 105, 2, 0, 0, 0, 7, 9, 5, 0],
        )

    def test_overflow(self) -> None:
        with self.assertRaises(ValueError):
            encode_arguments([UintToken(8, 256)])


class DecodeTests(unittest.TestCase):
    def test_scalars(self) -> None:
        self.assertEqual(decode_return_value(b"\x01", 0, Bool(), []), ("true", 1))
        self.assertEqual(decode_return_value(b"\x00", 0, Bool(), []), ("false", 1))
        self.assertEqual(decode_return_value(bytes([46, 251]), 0, Int(16), []), ("-1234", 2))
        self.assertEqual(decode_return_value(bytes([210, 4, 0, 0]), 0, Uint(32), []), ("1234", 4))

    def test_offset(self) -> None:
        data = bytes([9, 9, 3, 0])
        self.assertEqual(decode_return_value(data, 2, Uint(16), []), ("3", 2))

    def test_no_return_type(self) -> None:
        self.assertIsNone(decode_return_value(b"\x01", 0, None, []))

    def test_bytes_and_string(self) -> None:
        self.assertEqual(
            decode_return_value(bytes([3, 0, 0, 0, 18, 52, 86]), 0, Bytes(), []),
            ("0x123456", 7),
        )
        self.assertEqual(
            decode_return_value(bytes([2, 0, 0, 0, 104, 105]), 0, String(), []),
            ("hi", 6),
        )

    def test_public_key(self) -> None:
        raw = bytes([0] * 7 + [1] + [0] * 24)
        self.assertEqual(
            decode_return_value(raw, 0, PublicKey(), []),
            (str(Pubkey.from_bytes(raw)), 32),
        )

    def test_vec_and_array(self) -> None:
        self.assertEqual(
            decode_return_value(bytes([3, 0, 0, 0, 1, 2, 3]), 0, Vec(Uint(8)), []),
            ("[1, 2, 3]", 7),
        )
        self.assertEqual(
            decode_return_value(bytes([1, 2, 3, 4]), 0, Array(Uint(8), 4), []),
            ("[1, 2, 3, 4]", 4),
        )

    def test_defined_types(self) -> None:
        idl = load_idl(CONTRACTS / "DefinedTypes.json")
        data = bytes([5, 0, 0, 0, 65, 108, 105, 99, 101, 30, 2])
        self.assertEqual(
            decode_return_value(data, 0, Defined("Person"), idl.types),
            ("{name: Alice, age: 30, favoriteColor: Blue}", len(data)),
        )
        token, end = decode_at_offset(bytes([1]), 0, Defined("Color"), idl.types)
        self.assertEqual(render_token(token), "Green")
        self.assertEqual(end, 1)

    def test_enum_index_out_of_range(self) -> None:
        idl = load_idl(CONTRACTS / "DefinedTypes.json")
        with self.assertRaises(DecodeError):
            decode_at_offset(bytes([3]), 0, Defined("Color"), idl.types)

    def test_unknown_defined_type(self) -> None:
        with self.assertRaises(TypeNotFoundError):
            decode_at_offset(b"\x00", 0, Defined("Missing"), [])

    def test_short_buffer(self) -> None:
        with self.assertRaises(DecodeError):
            decode_at_offset(bytes([1, 2]), 0, Uint(32), [])
        with self.assertRaises(DecodeError):
            decode_at_offset(bytes([5, 0, 0, 0, 1]), 0, Vec(Uint(8)), [])
        with self.assertRaises(DecodeError):
            decode_at_offset(b"", 0, Bool(), [])

    def test_float_is_unsupported(self) -> None:
        with self.assertRaises(UnsupportedTypeError):
            decode_at_offset(bytes(8), 0, Float(64), [])


class ReturnDataTests(unittest.TestCase):
    def test_return_data_from_logs(self) -> None:
        logs = [
            f"Program {PROGRAM} invoke [1]",
            _return_log(b"\x01"),
            f"Program {PROGRAM} success",
        ]
        self.assertEqual(return_data_from_logs(logs), [b"\x01"])

    def test_invalid_base64(self) -> None:
        with self.assertRaises(DecodeError):
            return_data_from_logs([f"Program return: {PROGRAM} !!!"])

    def test_decode_instruction_return_data(self) -> None:
        idl = load_idl(CONTRACTS / "flipper.json")
        get = find_instruction(idl, "get")
        self.assertEqual(decode_instruction_return_data([_return_log(b"\x01")], get, idl.types), "true")
        self.assertEqual(decode_instruction_return_data([], get, idl.types), "")

    def test_instruction_without_return_type(self) -> None:
        idl = load_idl(CONTRACTS / "flipper.json")
        flip = find_instruction(idl, "flip")
        self.assertIsNone(decode_instruction_return_data([_return_log(b"\x01")], flip, idl.types))


if __name__ == "__main__":
    unittest.main()
