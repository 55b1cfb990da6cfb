import json
import tempfile
import unittest
from pathlib import Path

from idlkit.errors import FileError, InstructionNotFoundError, SchemaParseError
from idlkit.idl import IdlAccounts, IdlEnum, IdlStruct, find_instruction, find_type_definition, load_idl, parse_idl
from idlkit.types import Array, Bool, Defined, Option, PublicKey, Uint, Vec, parse_idl_type, type_name, type_to_json

CONTRACTS = Path(__file__).parent / "contracts"


class IdlTypeTests(unittest.TestCase):
    def test_parse_spellings(self) -> None:
        self.assertEqual(parse_idl_type("bool"), Bool())
        self.assertEqual(parse_idl_type("u256"), Uint(256))
        self.assertEqual(parse_idl_type("publicKey"), PublicKey())
        self.assertEqual(parse_idl_type({"vec": "u8"}), Vec(Uint(8)))
        self.assertEqual(parse_idl_type({"array": ["u8", 4]}), Array(Uint(8), 4))
        self.assertEqual(parse_idl_type({"defined": "Person"}), Defined("Person"))
        self.assertEqual(parse_idl_type({"defined": {"name": "Person"}}), Defined("Person"))
        self.assertEqual(parse_idl_type({"option": "bool"}), Option(Bool()))

    def test_unknown_spelling(self) -> None:
        for raw in ("u7", {"map": "u8"}, {"array": ["u8"]}, 12):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    parse_idl_type(raw)

    def test_names(self) -> None:
        self.assertEqual(type_name(Vec(Uint(8))), "Vec<u8>")
        self.assertEqual(type_name(Array(Uint(8), 4)), "[u8; 4]")
        self.assertEqual(type_to_json(Array(Defined("Color"), 2)), {"array": [{"defined": "Color"}, 2]})


class LoadIdlTests(unittest.TestCase):
    def test_flipper(self) -> None:
        idl = load_idl(CONTRACTS / "flipper.json")
        self.assertEqual(idl.name, "flipper")
        self.assertEqual([i.name for i in idl.instructions], ["new", "flip", "get"])
        new = find_instruction(idl, "new")
        self.assertEqual([a.name for a in new.accounts], ["dataAccount", "payer", "systemProgram"])
        self.assertTrue(new.accounts[0].is_signer)
        self.assertFalse(new.accounts[2].is_mut)
        self.assertEqual(find_instruction(idl, "get").returns, Bool())
        self.assertIsNone(find_instruction(idl, "flip").returns)
        self.assertEqual(find_instruction(idl, "flip").docs, ["Invert the stored value."])

    def test_defined_types(self) -> None:
        idl = load_idl(CONTRACTS / "DefinedTypes.json")
        person = find_type_definition(idl.types, "Person")
        self.assertIsInstance(person.ty, IdlStruct)
        self.assertEqual([f.name for f in person.ty.fields], ["name", "age", "favoriteColor"])
        color = find_type_definition(idl.types, "Color")
        self.assertIsInstance(color.ty, IdlEnum)
        self.assertEqual([v.name for v in color.ty.variants], ["Red", "Green", "Blue"])
        self.assertIsNone(find_type_definition(idl.types, "Missing"))

    def test_nested_accounts_are_parsed(self) -> None:
        idl = load_idl(CONTRACTS / "nested_accounts.json")
        group = find_instruction(idl, "run").accounts[0]
        self.assertIsInstance(group, IdlAccounts)
        self.assertEqual(group.accounts[0].name, "inner")

    def test_instruction_not_found(self) -> None:
        idl = load_idl(CONTRACTS / "flipper.json")
        with self.assertRaisesRegex(InstructionNotFoundError, "Instruction missing not found"):
            find_instruction(idl, "missing")

    def test_missing_file(self) -> None:
        with self.assertRaises(FileError):
            load_idl(CONTRACTS / "does-not-exist.json")

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bad.json"
            path.write_text("{not json")
            with self.assertRaises(SchemaParseError):
                load_idl(path)

    def test_invalid_structure(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bad.json"
            path.write_text(json.dumps({"instructions": [{"name": "x", "args": [{"name": "a", "type": "u7"}]}]}))
            with self.assertRaises(SchemaParseError):
                load_idl(path)

    def test_empty_idl(self) -> None:
        idl = parse_idl({})
        self.assertEqual(idl.instructions, [])
        self.assertEqual(idl.types, [])


if __name__ == "__main__":
    unittest.main()
