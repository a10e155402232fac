"""Tests for .env and .gitignore helpers."""

from format_commit.services.env_store import (
    add_to_gitignore,
    get_env_key,
    is_in_gitignore,
    key_exists_in_env,
    set_env_key,
)


def test_set_and_get_env_key(tmp_path):
    env_path = tmp_path / ".env"

    set_env_key(env_path, "OPENAI_API_KEY", "sk-test")

    assert env_path.exists()
    assert get_env_key(env_path, "OPENAI_API_KEY") == "sk-test"
    assert key_exists_in_env(env_path, "OPENAI_API_KEY")


def test_set_env_key_replaces_existing(tmp_path):
    env_path = tmp_path / ".env"
    env_path.write_text("OTHER=1\nOPENAI_API_KEY=old\n")

    set_env_key(env_path, "OPENAI_API_KEY", "new")

    assert get_env_key(env_path, "OPENAI_API_KEY") == "new"
    assert get_env_key(env_path, "OTHER") == "1"
    assert env_path.read_text().count("OPENAI_API_KEY") == 1


def test_missing_env_file(tmp_path):
    env_path = tmp_path / ".env"

    assert get_env_key(env_path, "OPENAI_API_KEY") is None
    assert not key_exists_in_env(env_path, "OPENAI_API_KEY")


def test_missing_key(tmp_path):
    env_path = tmp_path / ".env"
    env_path.write_text("OTHER=1\n")

    assert get_env_key(env_path, "OPENAI_API_KEY") is None


def test_gitignore(tmp_path):
    assert not is_in_gitignore(".env", root=tmp_path)

    (tmp_path / ".gitignore").write_text("# secrets\nnode_modules")
    add_to_gitignore("./.env", root=tmp_path)

    assert (tmp_path / ".gitignore").read_text() == "# secrets\nnode_modules\n.env\n"
    assert is_in_gitignore(".env", root=tmp_path)
    assert is_in_gitignore("./.env", root=tmp_path)


def test_gitignore_rooted_entry(tmp_path):
    (tmp_path / ".gitignore").write_text("/.env\n")

    assert is_in_gitignore(".env", root=tmp_path)
    assert not is_in_gitignore("other.env", root=tmp_path)
