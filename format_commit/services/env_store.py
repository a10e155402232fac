"""Local storage of API keys in ``.env`` and ``.gitignore`` upkeep."""

import logging
from pathlib import Path

from dotenv import dotenv_values, get_key, set_key

logger = logging.getLogger(__name__)


def _normalize(file_path: str) -> str:
    return file_path[2:] if file_path.startswith("./") else file_path


def get_env_key(env_path: str | Path, key_name: str) -> str | None:
    """Read a key from an env file, or ``None`` if the file or key is missing."""
    if not Path(env_path).exists():
        return None
    value = get_key(env_path, key_name)
    return value.strip() if value else None


def key_exists_in_env(env_path: str | Path, key_name: str) -> bool:
    if not Path(env_path).exists():
        return False
    return key_name in dotenv_values(env_path)


def set_env_key(env_path: str | Path, key_name: str, value: str) -> None:
    """Add or replace a key in an env file, creating the file if needed."""
    path = Path(env_path)
    path.touch(exist_ok=True)
    set_key(path, key_name, value, quote_mode="never")
    logger.debug("Stored %s in %s", key_name, path)


def is_in_gitignore(file_path: str, root: Path | None = None) -> bool:
    """Check whether a path is listed verbatim in the project ``.gitignore``."""
    gitignore = (root or Path.cwd()) / ".gitignore"
    if not gitignore.exists():
        return False

    normalized = _normalize(file_path)
    for line in gitignore.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line in (normalized, f"/{normalized}"):
            return True
    return False


def add_to_gitignore(file_path: str, root: Path | None = None) -> None:
    """Append a path to the project ``.gitignore``."""
    gitignore = (root or Path.cwd()) / ".gitignore"
    content = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
    if content and not content.endswith("\n"):
        content += "\n"
    content += f"{_normalize(file_path)}\n"
    gitignore.write_text(content, encoding="utf-8")
    logger.debug("Added %s to %s", file_path, gitignore)
