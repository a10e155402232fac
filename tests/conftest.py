"""Common test fixtures."""

import pytest

from format_commit.config.settings import AIConfig, ChoiceItem, CommitConfig
from format_commit.core.renderer import BranchFormat, CommitFormat


@pytest.fixture
def types():
    return (ChoiceItem("feat", "New feature(s)"), ChoiceItem("fix", "Issue(s) fixing"))


@pytest.fixture
def scopes():
    return (ChoiceItem("api", "Backend API"), ChoiceItem("ui", "User interface"))


@pytest.fixture
def make_config(types, scopes):
    """Fixture for creating CommitConfig instances."""

    def _make_config(fmt=CommitFormat.PAREN_SENTENCE, custom_format=None, with_scopes=True, **kwargs):
        return CommitConfig(
            format=fmt,
            custom_format=custom_format,
            types=types,
            scopes=scopes if with_scopes else (),
            min_length=kwargs.pop("min_length", 5),
            max_length=kwargs.pop("max_length", 80),
            **kwargs,
        )

    return _make_config


@pytest.fixture
def custom_config(make_config):
    """Config using the ``{Issue ID} - type - scope - description`` pattern."""
    return make_config(CommitFormat.CUSTOM, "{Issue ID} - type - scope - description")


@pytest.fixture
def branch_config(types, scopes):
    return CommitConfig(
        branch_format=BranchFormat.CUSTOM,
        custom_branch_format="type/{Issue ID}-description",
        types=types,
        scopes=scopes,
    )


@pytest.fixture
def ai_config(make_config):
    return make_config(
        CommitFormat.COLON_SENTENCE,
        with_scopes=False,
        ai=AIConfig(enabled=True, provider="openai", model="gpt-4o-mini"),
    )
