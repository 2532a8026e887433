import getpass
import logging
import os

from pathlib import Path

ENV_PASSWORD = "SOLVAULT_PASSWORD"
ENV_WORKERS = "SOLVAULT_WORKERS"
ENV_LOG_LEVEL = "SOLVAULT_LOG_LEVEL"

# extension -> editor language id
LANGUAGES = {
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".h": "c",
    ".hpp": "cpp",
    ".java": "java",
    ".js": "javascript",
    ".kt": "kotlin",
    ".md": "markdown",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".sh": "shell",
    ".swift": "swift",
    ".ts": "typescript",
}


def default_workers() -> int:
    raw = os.environ.get(ENV_WORKERS)
    if raw:
        try:
            return max(1, int(raw))
        except ValueError:
            logging.getLogger(__name__).warning("ignoring invalid %s=%r", ENV_WORKERS, raw)
    return max(1, (os.cpu_count() or 1))


def resolve_password(password: str | None, confirm: bool = False) -> str:
    """--password, then $SOLVAULT_PASSWORD, then an interactive prompt."""
    if password:
        return password
    env = os.environ.get(ENV_PASSWORD)
    if env:
        return env
    entered = getpass.getpass("Password: ")
    if confirm and getpass.getpass("Repeat password: ") != entered:
        raise ValueError("Passwords do not match")
    return entered


def log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    name = os.environ.get(ENV_LOG_LEVEL, "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def guess_language(path: Path) -> str:
    return LANGUAGES.get(path.suffix.lower(), "plaintext")
