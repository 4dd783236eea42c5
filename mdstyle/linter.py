"""Running the rule catalog over documents and files."""

from __future__ import annotations

from pathlib import Path

from .config import ConfigError, LintConfig, normalize_config, options_for, validate_config
from .exceptions import LintFileError
from .filesystem import collect_file_stat, enforce_file_size, safe_read
from .models import Document, RuleResult
from .rules import RULES, Rule, find_rule
from .tokens import parse_document
from .views import DocumentViews


def _codes(names: tuple[str, ...]) -> set[str]:
    codes = set()
    for name in names:
        rule = find_rule(name)
        if rule is not None:
            codes.add(rule.code)
    return codes


def select_rules(config: LintConfig | None = None) -> list[Rule]:
    """Return the rules a configuration runs, in catalog order.

    Args:
        config: Configuration naming enabled and disabled rules. Defaults to a
            new `LintConfig`, which runs every rule.

    Returns:
        list[Rule]: Selected rules.

    Examples:
        [rule.code for rule in select_rules(LintConfig(enable=("MD009", "hard-tabs")))]
    """
    config = normalize_config(config or LintConfig())
    enabled = _codes(config.enable) if config.enable else {rule.code for rule in RULES}
    disabled = _codes(config.disable)
    return [rule for rule in RULES if rule.code in enabled and rule.code not in disabled]


def lint_document(document: Document, config: LintConfig | None = None) -> list[RuleResult]:
    """Run every selected rule against a tokenized document.

    Derived views are built at most once and shared by all rules.

    Args:
        document: Lines and tokens of the document.
        config: Rule selection and options. Defaults to a new `LintConfig`.

    Returns:
        list[RuleResult]: One result per selected rule, in catalog order,
            including rules that found nothing.

    Raises:
        ConfigError: If the configuration fails validation.
    """
    config = normalize_config(config or LintConfig())
    validate_config(config)
    views = DocumentViews(document)
    return [rule.run(views, options_for(config, rule)) for rule in select_rules(config)]


def lint_text(content: str, config: LintConfig | None = None) -> list[RuleResult]:
    """Tokenize Markdown content and lint it.

    Examples:
        results = lint_text("# Title\\n\\nSome text.  \\n")
        [result.rule.code for result in results if result.line_numbers]  # ["MD009"]
    """
    return lint_document(parse_document(content), config)


def lint_file(
    filepath: Path, config: LintConfig | None = None, max_file_size: int | None = None
) -> list[RuleResult]:
    """Read and lint a Markdown file.

    Args:
        filepath: Path to the Markdown file.
        config: Rule selection and options. Defaults to a new `LintConfig`.
        max_file_size: Optional override for the configured maximum size.

    Returns:
        list[RuleResult]: Results as returned by `lint_document`.

    Raises:
        FileTooLargeError: If the file exceeds the size limit.
        LintFileError: If the file cannot be accessed or is not valid UTF-8,
            or the configuration is invalid.

    Examples:
        results = lint_file(Path("README.md"), build_config(Path.cwd()))
    """
    config = config or LintConfig()
    effective_max_file_size = config.max_file_size if max_file_size is None else max_file_size

    try:
        stat_result = collect_file_stat(filepath)
    except IOError as error:
        raise LintFileError(str(error)) from error
    enforce_file_size(stat_result, effective_max_file_size, filepath)

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise LintFileError(error_message) from error
    except IOError as error:
        raise LintFileError(str(error)) from error

    try:
        return lint_text(content, config)
    except ConfigError as error:
        raise LintFileError(f"{filepath}: {error}") from error


def format_results(filepath: Path | str, results: list[RuleResult]) -> list[str]:
    """Render one report line per violation.

    Lines are grouped by rule in result order, then by line number as the
    rule reported them.

    Examples:
        format_results("README.md", results)
        # ["README.md: 3: MD009/trailing-whitespace Trailing spaces"]
    """
    report = []
    for result in results:
        rule = result.rule
        for line_number in result.line_numbers:
            report.append(
                f"{filepath}: {line_number}: {rule.code}/{rule.alias} {rule.description}"
            )
    return report
