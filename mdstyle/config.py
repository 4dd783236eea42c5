"""Configuration loading and management."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE
from .rules import RULES, Rule, find_rule


@dataclass
class LintConfig:
    """Configuration for a lint run.

    Attributes:
        enable: Rule codes or aliases to run. Empty means every rule.
        disable: Rule codes or aliases to skip, applied after `enable`.
        rules: Per-rule option tables keyed by rule code or alias. A value of
            ``False`` disables the rule, ``True`` keeps its defaults.
        max_file_size: Maximum file size in bytes that will be linted.

    Examples:
        LintConfig(disable=("MD013",), rules={"list-nesting-indent": {"indent": 4}})
    """

    enable: tuple[str, ...] = ()
    disable: tuple[str, ...] = ()
    rules: dict[str, object] = field(default_factory=dict)
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`line_length` must be a positive integer")
    """


class UnknownRuleError(ConfigError):
    """Raised when configuration references a rule that does not exist.

    Args:
        name: The unrecognized rule code or alias.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown rule `{name}`")


def load_config(search_path: Path) -> LintConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.mdstyle]`` table from `pyproject.toml` and the ``[mdstyle]`` or
    ``[tool.mdstyle]`` table from `.mdstyle.toml` when present. Returns default
    values when no configuration is found. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        LintConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "mdstyle")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".mdstyle.toml",
            table_paths=[("mdstyle",), ("tool", "mdstyle")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return LintConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> LintConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> LintConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return LintConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return LintConfig()

    # Accept `max-file-size` as an alias for `max_file_size`.
    raw_config = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return LintConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: LintConfig) -> LintConfig:
    """Fold boolean rule entries into `enable`/`disable` and coerce sequences.

    Option keys in rule tables accept dashes in place of underscores.

    Args:
        config: Configuration as loaded or constructed.

    Returns:
        LintConfig: Configuration where `rules` only holds option tables.

    Raises:
        ConfigError: If `enable`, `disable` or `rules` have the wrong shape.
    """
    enable = _as_names("enable", config.enable)
    disable = _as_names("disable", config.disable)

    if not isinstance(config.rules, Mapping):
        raise ConfigError("`rules` must be a table of rule settings")

    rules: dict[str, object] = {}
    for name, settings in config.rules.items():
        if settings is False:
            disable = (*disable, name)
        elif settings is True:
            continue
        elif isinstance(settings, Mapping):
            rules[name] = {key.replace("-", "_"): value for key, value in settings.items()}
        else:
            rules[name] = settings

    return replace(config, enable=enable, disable=disable, rules=rules)


def _as_names(key: str, value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"`{key}` must be a list of rule names")
    return tuple(value)


def resolve_options(rule: Rule, raw: object = None) -> object:
    """Validate a raw option table and build the rule's options record.

    Integer options must be positive integers, string options must be
    strings, and options with a fixed set of choices must use one of them.

    Args:
        rule: Rule the options belong to.
        raw: Option table from configuration; None means all defaults.

    Returns:
        object: Options dataclass instance, or None for rules without options.

    Raises:
        ConfigError: If the table is not a mapping or holds unknown or invalid
            options.

    Examples:
        resolve_options(find_rule("MD013"), {"line_length": 120})
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Settings for `{rule.code}` must be a table")

    if rule.options_class is None:
        if raw:
            raise ConfigError(f"`{rule.code}` ({rule.alias}) does not take options")
        return None

    defaults = {option.name: option.default for option in fields(rule.options_class)}
    choices = rule.options_class.choices
    for key, value in raw.items():
        if key not in defaults:
            raise ConfigError(f"Unknown option `{key}` for `{rule.code}` ({rule.alias})")
        if isinstance(defaults[key], int):
            _ensure_integers({key: value})
            _ensure_positive({key: value})
        elif not isinstance(value, str):
            raise ConfigError(f"`{key}` must be a string")
        if key in choices and value not in choices[key]:
            allowed = ", ".join(choices[key])
            raise ConfigError(f"`{key}` must be one of: {allowed}")

    return rule.options(raw)


def options_for(config: LintConfig, rule: Rule) -> object:
    """Merge the option tables configured for `rule` under its code and alias.

    Raises:
        ConfigError: If the merged options are invalid.
    """
    merged: dict[str, object] = {}
    for name, settings in config.rules.items():
        if find_rule(name) is rule:
            if not isinstance(settings, Mapping):
                raise ConfigError(f"Settings for `{name}` must be a table")
            merged.update(settings)
    return resolve_options(rule, merged)


def validate_config(config: LintConfig) -> None:
    """Validate a `LintConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        UnknownRuleError: If a rule name in `enable`, `disable` or `rules` is
            not in the catalog.
        ConfigError: If any option table is invalid or `max_file_size` is not
            a positive integer.

    Examples:
        validate_config(LintConfig(enable=("MD001", "line-length")))
    """
    config = normalize_config(config)

    for name in (*config.enable, *config.disable, *config.rules):
        if find_rule(name) is None:
            raise UnknownRuleError(name)

    for rule in RULES:
        options_for(config, rule)

    _ensure_integers({"max_file_size": config.max_file_size})
    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: LintConfig, **overrides: object) -> LintConfig:
    """Apply override values to a `LintConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None or empty sequences are ignored.

    Returns:
        LintConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `LintConfig`.

    Examples:
        updated = apply_overrides(config, disable=("MD013",))
    """
    changes = {key: value for key, value in overrides.items() if value not in (None, (), [])}
    if not changes:
        return config
    return replace(config, **changes)


def with_rule_options(config: LintConfig, name: str, **options: object) -> LintConfig:
    """Return a copy of `config` with extra options set for one rule.

    None values are ignored. Existing options for the rule are kept unless
    overridden.

    Examples:
        with_rule_options(config, "MD013", line_length=120)
    """
    changes = {key: value for key, value in options.items() if value is not None}
    if not changes:
        return config
    rules = dict(config.rules)
    current = rules.get(name)
    rules[name] = {**(current if isinstance(current, Mapping) else {}), **changes}
    return replace(config, rules=rules)


def build_config(search_path: Path, **overrides: object) -> LintConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        LintConfig: Validated configuration ready for linting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), disable=("MD013",))
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
