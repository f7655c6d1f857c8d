import tomllib
from dataclasses import dataclass
from pathlib import Path

from stackline.protect import DEFAULT_PROTECTED_BRANCHES

CONFIG_DIR_NAME = ".stackline"
PROTECTED_BRANCH_GIT_KEY = "stack.protected-branch"


class ConfigError(Exception):
    """Raised when a config file is present but cannot be used."""


@dataclass(frozen=True)
class StacklineConfig:
    """In-memory representation of `.stackline/config.toml`.

    Example config.toml:
      [protected]
      # gitignore-style patterns; later patterns win, `!` negates
      branches = ["release/*", "!release/experimental"]
      # Keep main/master/dev/stable/gh-pages protected as well (default true)
      extend_defaults = true
    """

    protected_branches: tuple[str, ...]


def default_config() -> StacklineConfig:
    return StacklineConfig(protected_branches=DEFAULT_PROTECTED_BRANCHES)


def load_config(repo_root: Path) -> StacklineConfig:
    """Load .stackline/config.toml under repo_root if present; otherwise return defaults.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = repo_root / CONFIG_DIR_NAME / "config.toml"
    if not cfg_path.exists():
        return default_config()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{cfg_path}: invalid TOML: {exc}") from exc

    protected = data.get("protected", {})
    if not isinstance(protected, dict):
        raise ConfigError(f"{cfg_path}: [protected] must be a table")

    branches = protected.get("branches", [])
    if not isinstance(branches, list) or not all(isinstance(b, str) for b in branches):
        raise ConfigError(f"{cfg_path}: protected.branches must be a list of strings")

    extend_defaults = protected.get("extend_defaults", True)
    if not isinstance(extend_defaults, bool):
        raise ConfigError(f"{cfg_path}: protected.extend_defaults must be true or false")

    patterns = (DEFAULT_PROTECTED_BRANCHES if extend_defaults else ()) + tuple(branches)
    return StacklineConfig(protected_branches=patterns)


def merge_git_config_patterns(config: StacklineConfig, patterns: list[str]) -> StacklineConfig:
    """Append protection patterns read from `git config stack.protected-branch`.

    Git config patterns come last so they take precedence over the file.
    """
    if not patterns:
        return config
    return StacklineConfig(protected_branches=config.protected_branches + tuple(patterns))
