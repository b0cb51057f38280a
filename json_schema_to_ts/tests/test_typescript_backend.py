"""
Tests for the TypeScript backend.

ASTs are built by hand so that each rendering rule is exercised on its own.
"""

import pytest

from json_schema_to_ts.pipeline.backends import TypeScriptBackend
from json_schema_to_ts.pipeline.backends.base import jsdoc
from json_schema_to_ts.pipeline.config import CodeGeneratorConfig
from json_schema_to_ts.pipeline.errors import GenerationError
from json_schema_to_ts.pipeline.schema_ast import (
    ArrayNode,
    AstKind,
    EnumNode,
    InterfaceMember,
    InterfaceNode,
    IntersectionNode,
    LiteralNode,
    PrimitiveNode,
    ReferenceNode,
    TupleNode,
    UnionNode,
)


def primitive(kind, **kwargs):
    return PrimitiveNode(kind=kind, **kwargs)


def person():
    return InterfaceNode(
        standalone_name="Person",
        members=[
            InterfaceMember(key_name="first", ast=primitive(AstKind.STRING), is_required=True),
            InterfaceMember(key_name="age", ast=primitive(AstKind.NUMBER), default="16", has_default=True),
        ],
    )


@pytest.fixture
def backend():
    return TypeScriptBackend(CodeGeneratorConfig())


class TestTuples:
    def elements(self):
        return [primitive(AstKind.STRING), primitive(AstKind.NUMBER), primitive(AstKind.BOOLEAN)]

    def test_union_of_prefixes(self, backend):
        ast = TupleNode(elements=self.elements(), min_items=1)
        assert backend.render_type(ast) == "[string] | [string, number] | [string, number, boolean]"

    def test_empty_prefix_when_no_minimum(self, backend):
        ast = TupleNode(elements=self.elements()[:2], min_items=0)
        assert backend.render_type(ast) == "[] | [string] | [string, number]"

    def test_spread_extends_longest_prefix(self, backend):
        ast = TupleNode(elements=self.elements()[:2], min_items=1, spread=primitive(AstKind.ANY))
        assert backend.render_type(ast) == "[string] | [string, number, ...any[]]"

    def test_no_slack_renders_one_tuple(self, backend):
        ast = TupleNode(elements=self.elements(), min_items=3)
        assert backend.render_type(ast) == "[string, number, boolean]"

    def test_no_slack_with_spread(self, backend):
        ast = TupleNode(elements=self.elements()[:1], min_items=1, spread=primitive(AstKind.NUMBER))
        assert backend.render_type(ast) == "[string, ...number[]]"

    def test_minimum_above_item_count(self, backend):
        ast = TupleNode(elements=self.elements()[:1], min_items=2)
        with pytest.raises(GenerationError, match="greater than"):
            backend.render_type(ast)


class TestUnions:
    def test_null_is_last(self, backend):
        ast = UnionNode(
            members=[
                primitive(AstKind.NULL),
                InterfaceNode(standalone_name="Person"),
                InterfaceNode(standalone_name="Name"),
            ]
        )
        assert backend.render_type(ast) == "Name | Person | null"

    def test_anonymous_member(self, backend):
        ast = UnionNode(members=[InterfaceNode(standalone_name="Person"), primitive(AstKind.STRING)])
        with pytest.raises(GenerationError, match="can only reference named interfaces"):
            backend.render_type(ast)


class TestIntersections:
    def test_own_members_and_refs(self, backend):
        own = InterfaceNode(
            members=[InterfaceMember(key_name="age", ast=primitive(AstKind.NUMBER), default="0", has_default=True)]
        )
        ast = IntersectionNode(members=[own, InterfaceNode(standalone_name="Person")])
        assert backend.render_type(ast) == "{age?: number} & Person"

    def test_no_members(self, backend):
        with pytest.raises(GenerationError, match="No members"):
            backend.render_type(IntersectionNode())

    def test_anonymous_non_interface_member(self, backend):
        ast = IntersectionNode(members=[primitive(AstKind.STRING)])
        with pytest.raises(GenerationError, match="Expected an AST type of 'interface'"):
            backend.render_type(ast)


class TestExpressions:
    def test_enum(self, backend):
        ast = EnumNode(members=[LiteralNode(value="one"), LiteralNode(value=2), LiteralNode(value=True)])
        assert backend.render_type(ast) == '"one" | 2 | true'

    def test_enum_with_object_literal(self, backend):
        ast = EnumNode(members=[LiteralNode(value={"a": 1})])
        with pytest.raises(GenerationError, match="Enum items must be of type"):
            backend.render_type(ast)

    def test_array_of_union_is_parenthesized(self, backend):
        union = UnionNode(members=[InterfaceNode(standalone_name="A"), InterfaceNode(standalone_name="B")])
        assert backend.render_type(ArrayNode(element=union)) == "(A | B)[]"
        assert backend.render_type(ArrayNode(element=primitive(AstKind.STRING))) == "string[]"

    def test_named_node_renders_as_reference(self, backend):
        assert backend.render_type(InterfaceNode(standalone_name="all_of")) == "AllOf"

    def test_custom_type(self, backend):
        assert backend.render_type(ReferenceNode(type_name="Date")) == "Date"

    def test_member_keys_and_nullability(self, backend):
        ast = InterfaceNode(
            members=[
                InterfaceMember(key_name="first-name", ast=primitive(AstKind.STRING), is_required=True),
                InterfaceMember(
                    key_name="nick", ast=primitive(AstKind.STRING), is_nullable=True, default="null", has_default=True
                ),
                InterfaceMember(key_name="^x", ast=primitive(AstKind.NUMBER), is_required=True, is_index_signature=True),
                InterfaceMember(key_name="hidden", ast=primitive(AstKind.NUMBER), is_pattern_property=True),
            ]
        )
        assert backend.render_type(ast) == '{"first-name": string; nick?: string | null; [k: string]: number}'

    def test_anonymous_self_reference(self, backend):
        ast = InterfaceNode()
        ast.members.append(InterfaceMember(key_name="self", ast=ast, is_required=True))
        with pytest.raises(GenerationError, match="refers to itself"):
            backend.render_type(ast)


class TestGenerate:
    def test_interface_and_factory(self, backend):
        expected = (
            "export interface Person {\n"
            "  first: string;\n"
            "  age?: number;\n"
            "}\n"
            "\n"
            "export const makePerson = (input: {first: string; age?: number}): Person => ({\n"
            "  first: input.first,\n"
            "  age: input.age === undefined ? 16 : input.age\n"
            "});\n"
        )
        assert backend.generate(person()) == expected

    def test_generation_comment(self, backend):
        code = backend.generate(person(), "Generated by test")
        assert code.startswith("// Generated by test\n\nexport interface Person {")

    def test_comment_is_jsdoc(self, backend):
        ast = primitive(AstKind.STRING, standalone_name="Name", comment="A person's name.")
        assert backend.generate(ast) == "/** A person's name. */\nexport type Name = string;\n"

    def test_intersection_factory_follows_alias(self, backend):
        own = InterfaceNode(
            members=[InterfaceMember(key_name="age", ast=primitive(AstKind.NUMBER), default="0", has_default=True)]
        )
        ast = IntersectionNode(standalone_name="AllOf", members=[own, person()])
        code = backend.generate(ast)
        assert code.startswith(
            "export type AllOf = {age?: number} & Person;\n"
            "\n"
            "export const makeAllOf = (input: {age?: number} & Person): AllOf => "
            "Object.assign({age: input.age === undefined ? 0 : input.age}, makePerson(input));\n"
            "\n"
            "export interface Person {"
        )

    def test_intersection_of_refs_only(self, backend):
        other = InterfaceNode(standalone_name="Other")
        ast = IntersectionNode(standalone_name="Both", members=[person(), other])
        assert "=> Object.assign({}, makePerson(input), makeOther(input));" in backend.generate(ast)

    def test_nested_factories(self, backend):
        name = InterfaceNode(
            standalone_name="Name",
            members=[InterfaceMember(key_name="value", ast=primitive(AstKind.STRING), is_required=True)],
        )
        inline = InterfaceNode(
            members=[InterfaceMember(key_name="zip", ast=primitive(AstKind.STRING), default='""', has_default=True)]
        )
        root = InterfaceNode(
            standalone_name="Person",
            members=[
                InterfaceMember(key_name="name", ast=name, is_required=True),
                InterfaceMember(key_name="alias", ast=name, is_nullable=True, default="null", has_default=True),
                InterfaceMember(key_name="address", ast=inline, is_required=True),
            ],
        )
        code = backend.generate(root)
        assert "  name: makeName(input.name),\n" in code
        assert "  alias: input.alias === undefined ? null : input.alias === null ? null : makeName(input.alias),\n" in code
        assert '  address: {zip: input.address.zip === undefined ? "" : input.address.zip}\n' in code

    def test_index_signature_factory_spreads_input(self, backend):
        ast = InterfaceNode(
            standalone_name="Scores",
            members=[InterfaceMember(key_name="^.*$", ast=primitive(AstKind.NUMBER), is_required=True, is_index_signature=True)],
        )
        code = backend.generate(ast)
        assert "export interface Scores {\n  [k: string]: number;\n}" in code
        assert "export const makeScores = (input: {[k: string]: number}): Scores => ({\n  ...input\n});" in code

    def test_empty_interface(self, backend):
        code = backend.generate(InterfaceNode(standalone_name="Empty"))
        assert code == "export interface Empty {}\n\nexport const makeEmpty = (input: {}): Empty => ({});\n"

    def test_shared_node_declared_once(self, backend):
        shared = person()
        root = InterfaceNode(
            standalone_name="Couple",
            members=[
                InterfaceMember(key_name="a", ast=shared, is_required=True),
                InterfaceMember(key_name="b", ast=shared, is_required=True),
            ],
        )
        assert backend.generate(root).count("export interface Person") == 1

    def test_same_name_identical_text_declared_once(self, backend):
        root = UnionNode(standalone_name="Pair", members=[person(), person()])
        assert backend.generate(root).count("export interface Person") == 1

    def test_same_name_different_text(self, backend):
        other = InterfaceNode(
            standalone_name="Person",
            members=[InterfaceMember(key_name="last", ast=primitive(AstKind.STRING), is_required=True)],
        )
        root = UnionNode(standalone_name="Pair", members=[person(), other])
        with pytest.raises(GenerationError, match="declared twice"):
            backend.generate(root)

    def test_same_name_different_comment_declared_once(self, backend):
        described = person()
        described.comment = "Stand-in for the lead."
        root = InterfaceNode(
            standalone_name="Team",
            members=[
                InterfaceMember(key_name="lead", ast=person(), is_required=True),
                InterfaceMember(key_name="backup", ast=described, is_required=True),
            ],
        )
        code = backend.generate(root)
        assert code.count("export interface Person") == 1
        assert "Stand-in" not in code

    def test_generate_twice_gives_same_output(self, backend):
        ast = person()
        assert backend.generate(ast) == backend.generate(ast)

    def test_root_only(self):
        internal = InterfaceNode(
            standalone_name="Shape_circle",
            internal_name=True,
            members=[InterfaceMember(key_name="circle", ast=primitive(AstKind.NUMBER), is_required=True)],
        )
        root = UnionNode(standalone_name="Shape", members=[internal, person()])
        backend = TypeScriptBackend(CodeGeneratorConfig(declare_externally_referenced=False))
        code = backend.generate(root)
        assert "export type Shape = Person | ShapeCircle;" in code
        assert "export interface ShapeCircle {" in code
        assert "export interface Person" not in code


class TestSuperTypes:
    def test_interface_extends_named_interface(self, backend):
        ast = InterfaceNode(
            standalone_name="Employee",
            super_types=[person()],
            members=[InterfaceMember(key_name="salary", ast=primitive(AstKind.NUMBER), is_required=True)],
        )
        code = backend.generate(ast)
        assert code.startswith(
            "export interface Employee extends Person {\n"
            "  salary: number;\n"
            "}\n"
            "\n"
            "export const makeEmployee = (input: {salary: number} & Person): Employee => "
            "Object.assign({}, makePerson(input), {salary: input.salary});\n"
        )
        assert "export interface Person {" in code

    def test_extends_without_own_members(self, backend):
        ast = InterfaceNode(standalone_name="Alias", super_types=[person(), InterfaceNode(standalone_name="Other")])
        code = backend.generate(ast)
        assert "export interface Alias extends Person, Other {}" in code
        assert (
            "export const makeAlias = (input: Person & Other): Alias => "
            "Object.assign({}, makePerson(input), makeOther(input));"
        ) in code

    def test_anonymous_interface_with_super_type(self, backend):
        inline = InterfaceNode(
            super_types=[person()],
            members=[InterfaceMember(key_name="role", ast=primitive(AstKind.STRING), is_required=True)],
        )
        root = InterfaceNode(
            standalone_name="Team", members=[InterfaceMember(key_name="lead", ast=inline, is_required=True)]
        )
        code = backend.generate(root)
        assert "  lead: {role: string} & Person;\n" in code
        assert "  lead: Object.assign({}, makePerson(input.lead), {role: input.lead.role})\n" in code


def test_jsdoc():
    assert jsdoc(None) == ""
    assert jsdoc("One line") == "/** One line */"
    assert jsdoc("First\n\nSecond") == "/**\n * First\n *\n * Second\n */"
