"""Tests for conversion routine and dispatcher emission."""

from convertible.core.manifest import EmitConfig
from convertible.core.parser import parse
from convertible.emit.conversions import dispatcher_name, emit_conversions, emit_dispatcher


class TestEmitConversions:
    def test_one_routine_per_rule(self, my_error_text: str):
        routines = emit_conversions(parse(my_error_text))

        assert [(r.foreign_type, r.variant, r.function_name) for r in routines] == [
            ("JsonError", "SerializationError", "my_error_from_json_error"),
            ("OtherError", "Unknown", "my_error_from_other_error"),
        ]

    def test_implicit_body(self, my_error_text: str):
        routine = emit_conversions(parse(my_error_text))[0]
        assert routine.source == (
            "def my_error_from_json_error(value: JsonError) -> MyError:\n"
            "    return MyError.SerializationError(value)"
        )

    def test_callable_body(self, my_error_text: str):
        routine = emit_conversions(parse(my_error_text))[1]
        assert routine.source == (
            "def my_error_from_other_error(value: OtherError) -> MyError:\n"
            "    return (lambda _: MyError.Unknown)(value)"
        )

    def test_variants_without_rules_emit_nothing(self):
        assert emit_conversions(parse("enum E { (A), (B(int)) }")) == []

    def test_dotted_and_generic_types(self):
        routines = emit_conversions(
            parse("enum E { (A(json.JSONDecodeError), [json::JSONDecodeError]) }")
        )
        assert routines[0].function_name == "e_from_json_json_decode_error"
        assert "(value: json.JSONDecodeError)" in routines[0].source

    def test_colliding_names_get_suffix(self):
        routines = emit_conversions(
            parse("enum E { (A(object), [a.KeyError, AKeyError, a_key_error]) }")
        )
        assert [r.function_name for r in routines] == [
            "e_from_a_key_error",
            "e_from_a_key_error_2",
            "e_from_a_key_error_3",
        ]


class TestDispatcher:
    def test_registrations(self, my_error_text: str):
        spec = parse(my_error_text)
        source = emit_dispatcher(spec, emit_conversions(spec))

        assert "@functools.singledispatch\ndef into_my_error(value: object) -> MyError:" in source
        assert source.endswith(
            "into_my_error.register(JsonError, my_error_from_json_error)\n"
            "into_my_error.register(OtherError, my_error_from_other_error)\n"
            "MyError.convert = staticmethod(into_my_error)"
        )

    def test_prefix_from_config(self):
        spec = parse("enum StoreError { (A) }")
        assert dispatcher_name(spec) == "into_store_error"
        assert dispatcher_name(spec, EmitConfig(dispatcher_prefix="to_")) == "to_store_error"

    def test_convert_variant_not_shadowed(self):
        spec = parse("enum E { (convert) }")
        source = emit_dispatcher(spec, [])
        assert "E.convert = " not in source
