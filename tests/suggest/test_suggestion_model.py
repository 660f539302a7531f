import dataclasses

import pytest

from plm_helper.suggest.suggestion_model import CommitSuggestion


def test_full_message_is_derived():
    suggestion = CommitSuggestion(type="feat", scope="ui", message="update Button component")
    assert suggestion.full_message == "feat(ui): update Button component"


def test_full_message_without_scope():
    assert CommitSuggestion(type="docs", message="update documentation").full_message == "docs: update documentation"


def test_suggestion_is_immutable():
    suggestion = CommitSuggestion(type="fix", message="update x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        suggestion.message = "changed"


def test_full_message_cannot_be_passed_in():
    with pytest.raises(TypeError):
        CommitSuggestion(type="fix", message="x", full_message="feat: y")


def test_equality_by_value():
    assert CommitSuggestion("ci", "update workflow") == CommitSuggestion("ci", "update workflow")
