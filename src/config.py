"""Unified configuration loaded from .vaultdigest.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from vaultdigest import prompts as default_prompts
from vaultdigest.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".vaultdigest.toml"
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "vaultdigest" / "config.toml"


class VaultConfig(BaseModel):
    """[vault] section: where notes live and how files are named."""

    path: str = ""
    input_file: str = ""
    archive_path: str = "Archive"
    archive_prefix: str = "Memory Archive - "
    ignore_prefix: str = "@ignore"
    focus_path: str = "Focuses"
    focus_prefix: str = "Weekly Focus - "

    @property
    def root(self) -> Path:
        return Path(self.path).expanduser()


class LLMConfig(BaseModel):
    """[llm] section."""

    model: str = "sonnet"
    api_key: str = ""
    timeout: int = 120


class UserConfig(BaseModel):
    """[user] section: identity substituted into prompts."""

    name: str = "User"


class ScheduleConfig(BaseModel):
    """[schedule] section.

    ``weekly_day`` uses ``date.weekday()`` numbering: Monday is 0.
    """

    weekly_day: int = Field(default=0, ge=0, le=6)


class ConcurrencyConfig(BaseModel):
    """[concurrency] section: fan-out ceilings."""

    lookup_workers: int = Field(default=4, ge=1)
    tag_summary_workers: int = Field(default=3, ge=1, le=3)
    file_workers: int = Field(default_factory=lambda: os.cpu_count() or 4, ge=1)


class TagConfig(BaseModel):
    """A single recognized hashtag ([[tags]] entry)."""

    name: str
    prompt: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip().lstrip("#")
        if not value:
            raise ValueError("tag name must not be empty")
        return value


class PromptConfig(BaseModel):
    """[prompts] section."""

    daily: str = default_prompts.DAILY_PROMPT
    weekly_default: str = default_prompts.WEEKLY_DEFAULT_PROMPT
    weekly_coach: str = default_prompts.WEEKLY_COACH_PROMPT
    weekly_intentions: str = default_prompts.WEEKLY_INTENTIONS_PROMPT
    backlog_review: str = default_prompts.BACKLOG_REVIEW_PROMPT


class VaultDigestConfig(BaseModel):
    """Top-level configuration model."""

    vault: VaultConfig = Field(default_factory=VaultConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    user: UserConfig = Field(default_factory=UserConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    tags: list[TagConfig] = Field(default_factory=list)
    prompts: PromptConfig = Field(default_factory=PromptConfig)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, tags: list[TagConfig]) -> list[TagConfig]:
        seen: set[str] = set()
        for tag in tags:
            key = tag.name.casefold()
            if key in seen:
                raise ValueError(f"duplicate tag name: {tag.name}")
            seen.add(key)
        return tags

    def find_tag(self, name: str) -> TagConfig | None:
        """Look up a configured tag by name, ignoring case."""
        key = name.casefold()
        for tag in self.tags:
            if tag.name.casefold() == key:
                return tag
        return None

    def ensure_valid(self) -> None:
        """Check settings the processors cannot run without.

        Raises:
            ConfigError: Listing every missing required setting.
        """
        problems: list[str] = []
        if not self.vault.path.strip():
            problems.append("vault path is required ([vault] path or VAULTDIGEST_VAULT_PATH)")
        if not self.vault.input_file.strip():
            problems.append(
                "input file is required ([vault] input_file or VAULTDIGEST_INPUT_FILE)"
            )
        if not self.vault.ignore_prefix.strip():
            problems.append("ignore prefix must not be empty")
        if problems:
            raise ConfigError(problems)


def load_config(path: str | Path | None = None) -> VaultDigestConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .vaultdigest.toml in CWD
    3. ~/.config/vaultdigest/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged VaultDigestConfig.

    Raises:
        ConfigError: When a TOML or env value fails validation.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for candidate in (Path(".") / CONFIG_FILENAME, GLOBAL_CONFIG_PATH):
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break

    config = _validate(data)

    return _apply_env_vars(config)


def merge_cli_overrides(config: VaultDigestConfig, **cli_kwargs: object) -> VaultDigestConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "vault_path": ("vault", "path"),
        "input_file": ("vault", "input_file"),
        "model": ("llm", "model"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = str(value)

    return _validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: VaultDigestConfig) -> VaultDigestConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "VAULTDIGEST_VAULT_PATH": ("vault", "path"),
        "VAULTDIGEST_INPUT_FILE": ("vault", "input_file"),
        "VAULTDIGEST_MODEL": ("llm", "model"),
        "VAULTDIGEST_USER_NAME": ("user", "name"),
        "ANTHROPIC_API_KEY": ("llm", "api_key"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    day_raw = os.environ.get("VAULTDIGEST_WEEKLY_DAY")
    if day_raw is not None:
        try:
            data["schedule"]["weekly_day"] = int(day_raw)
        except ValueError:
            raise ConfigError(
                [f"VAULTDIGEST_WEEKLY_DAY must be an integer, got {day_raw!r}"]
            ) from None

    return _validate(data)


def _validate(data: dict[str, object]) -> VaultDigestConfig:
    """Validate merged settings, reporting bad values as ConfigError."""
    try:
        return VaultDigestConfig.model_validate(data)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigError(problems) from exc
