"""Shared fixtures for dataknobs_verify tests."""

import pytest

from dataknobs_verify.rules.registry import BuiltinRuleRegistry, GlobalRuleRegistry
from dataknobs_verify.translation.manager import TranslationManager


@pytest.fixture(autouse=True)
def isolated_registries():
    """Reset process-wide registries and the base message catalog around each test."""
    GlobalRuleRegistry.reset()
    BuiltinRuleRegistry.reset()
    TranslationManager.reset_cache()
    yield
    GlobalRuleRegistry.reset()
    BuiltinRuleRegistry.reset()
    TranslationManager.reset_cache()


@pytest.fixture
def user_record():
    """A nested record with objects, lists and falsy-but-present values."""
    return {
        "name": "Ada",
        "email": "ada@example.com",
        "age": 36,
        "active": False,
        "score": 0,
        "user": {
            "profile": {"age": 5, "nickname": ""},
            "tags": ["admin", "ops"],
        },
        "items": [{"sku": "A-1", "qty": 2}, {"sku": "", "qty": 0}],
    }


@pytest.fixture
def locale_dir(tmp_path):
    """A directory holding an extra German locale file."""
    (tmp_path / "de.yaml").write_text(
        "validation:\n"
        "  required: \"Das Feld {field} ist erforderlich\"\n",
        encoding="utf-8",
    )
    return tmp_path
