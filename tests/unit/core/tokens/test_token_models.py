# tests/unit/core/tokens/test_token_models.py
"""Tests for token variants, intrinsic helpers and value classification."""

from __future__ import annotations

import math

import pytest

from stackforge.constructs import App, Resource, Stack
from stackforge.contracts.enums import IntrinsicName, PseudoParameter, ValueKind
from stackforge.contracts.errors import UnsupportedValueError
from stackforge.core.tokens import Aws, Fn, Intrinsic, Lazy, PseudoReference, ResourceReference, Token, classify, is_unresolved


class TestStringConversion:
    """Tokens embed into strings through the active registry."""

    def test_str_returns_marker(self, app: App, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert str(key.get_att("Arn")) == "${Token[v1.Key_Arn.1]}"

    def test_fstring_embeds_marker(self, app: App, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        text = f"arn:{key.ref}/*"
        assert text.startswith("arn:${Token[v1.Key_Ref.")
        assert text.endswith("]}/*")

    def test_concatenation_both_sides(self, app: App, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        marker = str(key.ref)
        assert "a-" + key.ref == "a-" + marker
        assert key.ref + "-b" == marker + "-b"

    def test_token_plus_token(self, app: App, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert key.ref + key.get_att("Arn") == str(key.ref) + str(key.get_att("Arn"))

    def test_add_unsupported_type(self, app: App, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        with pytest.raises(TypeError):
            key.ref + 1  # noqa: B018

    def test_same_token_same_marker(self, app: App, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert str(key.ref) == str(key.ref)
        assert key.ref is key.ref

    def test_to_string_without_session(self) -> None:
        app = App()
        stack = Stack(app, "Stack")
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert key.ref.to_string(app.registry) == "${Token[v1.Key_Ref.1]}"

    def test_as_list_is_single_list_marker(self, app: App) -> None:
        encoded = Lazy.of(lambda: ["a", "b"], hint="Zones").as_list()
        assert encoded == ["#{Token[v1.Zones.1]}"]


class TestVariants:
    """Each variant's resolve() output before re-resolution."""

    def test_resource_reference_target(self, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert isinstance(key.ref, ResourceReference)
        assert key.ref.reference_target is key
        assert key.get_att("Arn").attribute == "Arn"

    def test_pseudo_reference(self, stack: Stack) -> None:
        assert Aws.ACCOUNT_ID.parameter is PseudoParameter.ACCOUNT_ID
        assert Aws.REGION.reference_target is None
        assert stack.resolve(Aws.ACCOUNT_ID) == {"Ref": "AWS::AccountId"}
        assert stack.resolve(Aws.REGION) == {"Ref": "AWS::Region"}

    def test_intrinsic_helpers(self, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert Fn.ref(key) is key.ref
        assert Fn.get_att(key, "Arn") is key.get_att("Arn")
        joined = Fn.join(":", ["a", key.ref])
        assert isinstance(joined, Intrinsic)
        assert joined.name is IntrinsicName.JOIN

    def test_fn_resolution(self, stack: Stack) -> None:
        key = Resource(stack, "Key", type="AWS::KMS::Key")
        assert stack.resolve(Fn.join(":", ["a", key.ref])) == {"Fn::Join": [":", ["a", {"Ref": "Key"}]]}
        assert stack.resolve(Fn.select(1, ["x", "y"])) == {"Fn::Select": [1, ["x", "y"]]}
        assert stack.resolve(Fn.split(",", "a,b")) == {"Fn::Split": [",", "a,b"]}
        assert stack.resolve(Fn.base64(key.ref)) == {"Fn::Base64": {"Ref": "Key"}}

    def test_explicit_join_of_literals_is_not_folded(self, stack: Stack) -> None:
        assert stack.resolve(Fn.join("-", ["a", "b"])) == {"Fn::Join": ["-", ["a", "b"]]}

    def test_lazy_produces_at_resolution(self, stack: Stack) -> None:
        state = {"value": "early"}
        token = Lazy.of(lambda: state["value"])
        state["value"] = "late"
        assert stack.resolve(token) == "late"

    def test_lazy_with_producer_object(self, stack: Stack) -> None:
        class CountingProducer:
            def __init__(self) -> None:
                self.calls = 0

            def produce(self, context: object) -> int:
                self.calls += 1
                return self.calls

        producer = CountingProducer()
        token = Lazy(producer, hint="Count")
        assert token.display_hint == "Count"
        assert stack.resolve(token) == 1
        assert stack.resolve(token) == 2

    def test_tokens_compare_by_identity(self) -> None:
        assert PseudoReference(PseudoParameter.REGION) != PseudoReference(PseudoParameter.REGION)


class TestClassify:
    """Tagged classification of property-tree values."""

    @pytest.mark.parametrize("value", [None, True, 0, -3, 1.5, "", "text"])
    def test_scalars(self, value: object) -> None:
        assert classify(value) is ValueKind.SCALAR

    @pytest.mark.parametrize("value", [[], [1], (1, 2)])
    def test_sequences(self, value: object) -> None:
        assert classify(value) is ValueKind.SEQUENCE

    def test_mapping(self) -> None:
        assert classify({"a": 1}) is ValueKind.MAPPING

    def test_token(self) -> None:
        assert classify(Lazy.of(lambda: 1)) is ValueKind.TOKEN

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_floats_rejected(self, value: float) -> None:
        with pytest.raises(UnsupportedValueError, match="non-finite"):
            classify(value, "Res.Properties.Size")

    @pytest.mark.parametrize("value", [object(), {1, 2}, b"bytes"])
    def test_unknown_types_rejected(self, value: object) -> None:
        with pytest.raises(UnsupportedValueError) as exc_info:
            classify(value, "Res.Properties.X")
        assert exc_info.value.path == "Res.Properties.X"

    def test_is_unresolved(self, app: App) -> None:
        token = Lazy.of(lambda: 1)
        assert is_unresolved(token)
        assert is_unresolved(f"x{token}")
        assert not is_unresolved("x")
        assert not is_unresolved([token])
        assert isinstance(token, Token)
