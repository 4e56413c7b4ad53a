"""Tests for dataknobs_verify.exceptions module."""

import pytest
from dataknobs_common import ConfigurationError as BaseConfigurationError
from dataknobs_common import DataknobsError
from dataknobs_common import NotFoundError as BaseNotFoundError

from dataknobs_verify.exceptions import (
    AlreadyVerifiedError,
    ConditionalChainError,
    ConfigurationError,
    ContractViolationError,
    IncompleteConditionError,
    InvalidOperatorError,
    LocaleNotFoundError,
    MixedCombinatorError,
    NoActiveFieldError,
    ResourceError,
    RuleNotFoundError,
    TranslationLoadError,
    UnusedRuleError,
    VerifyError,
)


class TestVerifyError:
    """The package root is the common DataknobsError."""

    def test_context(self):
        """Context is kept and details aliases it."""
        error = VerifyError("boom", context={"rule": "email"})
        assert str(error) == "boom"
        assert error.context == {"rule": "email"}
        assert error.details is error.context

    def test_details_alias(self):
        assert VerifyError("boom", details={"a": 1}).context == {"a": 1}

    def test_default_context(self):
        assert VerifyError("boom").context == {}

    def test_common_base(self):
        """Verify errors are caught as dataknobs errors."""
        assert VerifyError is DataknobsError
        assert issubclass(ContractViolationError, DataknobsError)
        assert ConfigurationError is BaseConfigurationError


class TestHierarchy:
    """Contract violations and resource failures stay in separate families."""

    @pytest.mark.parametrize(
        "error",
        [
            NoActiveFieldError("email"),
            IncompleteConditionError("verify"),
            MixedCombinatorError("and", "or"),
            InvalidOperatorError("~", ["="]),
            AlreadyVerifiedError(),
            RuleNotFoundError("fake_test"),
            UnusedRuleError("required", "verify"),
        ],
    )
    def test_contract_violations(self, error):
        assert isinstance(error, ContractViolationError)
        assert isinstance(error, VerifyError)

    def test_chain_errors(self):
        assert issubclass(IncompleteConditionError, ConditionalChainError)
        assert issubclass(MixedCombinatorError, ConditionalChainError)

    def test_invalid_operator_is_value_error(self):
        assert isinstance(InvalidOperatorError("~", ["="]), ValueError)

    def test_rule_not_found(self):
        """Unknown rules are both contract violations and common not-found errors."""
        error = RuleNotFoundError("fake_test", ["email"])
        assert isinstance(error, BaseNotFoundError)
        assert error.rule_name == "fake_test"
        assert "fake_test" in str(error)
        assert error.context["available"] == ["email"]

    def test_resource_errors(self):
        """Locale failures are resource errors with context."""
        assert isinstance(TranslationLoadError("x.yaml", "bad"), ResourceError)
        error = LocaleNotFoundError("zz", ["/a/zz.yaml"])
        assert error.context == {"locale": "zz", "searched": ["/a/zz.yaml"]}

    def test_no_active_field_message(self):
        assert "Call field() first" in str(NoActiveFieldError("required"))

    def test_unused_rule_message(self):
        error = UnusedRuleError("required", "verify")
        assert "required()" in str(error)
        assert error.context == {"rule_name": "required", "operation": "verify"}
