"""Tests for sum-type emission."""

from convertible.core.manifest import EmitConfig
from convertible.core.parser import parse, parse_declarations
from convertible.emit.types import TypeGenerator, declaration_comment, emit_type


class TestEmitType:
    def test_base_class_and_variant_order(self, my_error_text: str):
        source = emit_type(parse(my_error_text))

        assert source.startswith("# pub enum MyError\nclass MyError:\n")
        assert '__variants__ = ("SerializationError", "Unknown")' in source
        assert source.index("class _MyError_SerializationError(MyError):") < source.index(
            "class _MyError_Unknown(MyError):"
        )

    def test_tuple_variant_fields(self):
        source = emit_type(parse("enum E { (Pair(int, dict[str, int])) }"))

        assert "    _0: int\n    _1: dict[str, int]" in source
        assert source.endswith("E.Pair = _E_Pair")

    def test_unit_variant_is_singleton(self):
        source = emit_type(parse("enum E { (Unknown) }"))

        assert 'def __repr__(self) -> str:\n        return "E.Unknown"' in source
        assert source.endswith("E.Unknown = _E_Unknown()")

    def test_zero_field_tuple_variant_is_class(self):
        source = emit_type(parse("enum E { (Empty()) }"))

        assert "__repr__" not in source
        assert source.endswith("E.Empty = _E_Empty")

    def test_qualified_names(self):
        source = emit_type(parse("enum E { (A(int)) }"))
        assert '__qualname__ = "E.A"' in source

    def test_single_variant_tuple_literal(self):
        assert '__variants__ = ("A",)' in emit_type(parse("enum E { (A) }"))

    def test_attributes_and_docs(self):
        source = emit_type(
            parse(
                """
                @register
                /// Errors of the store.
                pub enum E {
                    /// Bad input.
                    @tag("input")
                    (A(int)),
                }
                """
            )
        )

        assert '@register\nclass E:\n    """Errors of the store."""\n' in source
        assert (
            '@tag("input")\n'
            "@dataclasses.dataclass(frozen=True)\n"
            "class _E_A(E):\n"
            '    """Bad input."""\n'
        ) in source

    def test_conversion_lists_stripped(self):
        source = emit_type(parse("enum E { (A(KeyError), [(KeyError, Self.A)]) }"))
        assert "KeyError" in source
        assert "Self" not in source
        assert "[" not in source

    def test_config(self):
        config = EmitConfig(frozen=False, base_class="Exception")
        source = emit_type(parse("enum E { (A) }"), config)

        assert "class E(Exception):" in source
        assert "@dataclasses.dataclass(frozen=False)" in source


class TestDeclarationComment:
    def test_visibilities(self):
        assert declaration_comment(parse("enum E { (A) }")) == "# enum E"
        assert declaration_comment(parse("pub enum E { (A) }")) == "# pub enum E"
        assert declaration_comment(parse("pub(super) enum E { (A) }")) == "# pub(super) enum E"


class TestTypeGenerator:
    def test_single_section_matching_emit_type(self, my_error_text: str):
        declarations = parse_declarations(my_error_text)
        result = TypeGenerator(declarations, declarations.enums[0]).generate()

        assert result.sections == [emit_type(declarations.enums[0])]
        assert result.artifacts == {}
