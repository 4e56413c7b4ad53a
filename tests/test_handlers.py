"""Tests for dataknobs_verify.handlers and result modules."""

from dataknobs_verify.conditions import Condition, ConditionSet, Operator
from dataknobs_verify.handlers import ConditionalRuleInvocation, FieldHandler, RuleInvocation
from dataknobs_verify.result import ErrorCollection, ValidationError


class TestHandlers:
    """Field and subfield declaration records."""

    def test_rules_are_split_by_kind(self):
        """Conditional and plain invocations are kept apart."""
        handler = FieldHandler(name="x")
        condition_set = ConditionSet((Condition("y", Operator.EQ, 1),))
        handler.add_rule(RuleInvocation("required"))
        handler.add_rule(ConditionalRuleInvocation("email", condition_set=condition_set))
        assert [r.rule_name for r in handler.validations] == ["required"]
        assert [r.rule_name for r in handler.conditional_validations] == ["email"]
        assert handler.rule_count == 2
        assert handler.validations[0].is_required

    def test_subfield_paths(self):
        """Subfield paths join parent segments with dots."""
        handler = FieldHandler(name="user")
        profile = handler.add_subfield(("profile",))
        age = profile.add_subfield(("details", "age"))
        assert profile.path == "user.profile"
        assert age.path == "user.profile.details.age"
        assert age.segments == ("details", "age")
        assert handler.segments == ("user",)

    def test_field_name_with_dots(self):
        assert FieldHandler(name="a.b").path == "a.b"


class TestErrorCollection:
    """Ordered error collection."""

    def test_collection(self):
        """Errors keep insertion order and can be grouped by field."""
        errors = ErrorCollection()
        errors.add(ValidationError("a", None, "required", "A is required"))
        errors.add(ValidationError("b", "Bee", "email", "bad"))
        errors.add(ValidationError("a", None, "email", "bad a"))
        assert len(errors) == 3
        assert errors.fields() == ["a", "b"]
        assert [e.test for e in errors.for_field("a")] == ["required", "email"]
        assert errors.messages()[1] == "bad"
        assert errors[1].display_name == "Bee"
        assert not errors.is_empty
        errors.clear()
        assert errors.is_empty
