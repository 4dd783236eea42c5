from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from mdstyle.config import ConfigError, LintConfig
from mdstyle.exceptions import FileTooLargeError, LintFileError
from mdstyle.linter import format_results, lint_document, lint_file, lint_text, select_rules
from mdstyle.rules import RULES
from mdstyle.tokens import parse_document

CLEAN_DOCUMENT = "# Title\n\nSome text.\n\n## Section\n\n- one\n- two\n"


def _write_markdown(tmp_path: Path, content: str, name: str = "sample.md") -> Path:
    target = tmp_path / name
    target.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return target


def _violations(results) -> dict[str, tuple[int, ...]]:
    return {result.rule.code: result.line_numbers for result in results if result.line_numbers}


def test_catalog_has_unique_codes_and_aliases():
    codes = [rule.code for rule in RULES]
    aliases = [rule.alias for rule in RULES]

    assert len(RULES) == 28
    assert codes == sorted(codes)
    assert len(set(codes)) == len(codes)
    assert len(set(aliases)) == len(aliases)


def test_select_rules_defaults_to_all():
    assert select_rules() == list(RULES)


def test_select_rules_enable_and_disable():
    config = LintConfig(enable=("MD009", "hard-tabs", "MD013"), disable=("line-length",))

    assert [rule.code for rule in select_rules(config)] == ["MD009", "MD010"]


def test_lint_text_clean_document():
    results = lint_text(CLEAN_DOCUMENT)

    assert len(results) == len(RULES)
    assert _violations(results) == {}


def test_lint_text_reports_each_rule():
    content = "## Title\n#### Deep  \n"

    assert _violations(lint_text(content)) == {
        "MD001": (2,),
        "MD002": (1,),
        "MD009": (2,),
        "MD022": (1, 2),
    }


def test_lint_document_applies_rule_options():
    document = parse_document("1. a\n1. b\n")
    config = LintConfig(enable=("ordered-list-prefix",), rules={"MD029": {"style": "ordered"}})

    assert _violations(lint_document(document, config)) == {"MD029": (2,)}


def test_lint_document_rejects_invalid_config():
    with pytest.raises(ConfigError):
        lint_document(parse_document(""), LintConfig(rules={"MD013": {"line_length": -1}}))


def test_lint_file_reads_and_lints(tmp_path: Path):
    target = _write_markdown(tmp_path, "# Title\n\ntext\t\n")

    assert _violations(lint_file(target)) == {"MD010": (3,), "MD009": (3,)}


def test_lint_file_preserves_carriage_returns(tmp_path: Path):
    target = tmp_path / "crlf.md"
    target.write_bytes(b"# Title\r\n\r\ntext\r\n")

    assert _violations(lint_file(target)) == {}


def test_lint_file_enforces_size_limit(tmp_path: Path):
    target = _write_markdown(tmp_path, "# Title\n\ntext\n")

    with pytest.raises(FileTooLargeError) as excinfo:
        lint_file(target, max_file_size=4)

    assert excinfo.value.max_file_size == 4


def test_lint_file_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "bad.md"
    target.write_bytes(b"# Title\n\n\xff\xfe\n")

    with pytest.raises(LintFileError, match="Invalid UTF-8"):
        lint_file(target)


def test_lint_file_missing_path(tmp_path: Path):
    with pytest.raises(LintFileError):
        lint_file(tmp_path / "missing.md")


def test_lint_file_wraps_config_errors(tmp_path: Path):
    target = _write_markdown(tmp_path, "# Title\n")

    with pytest.raises(LintFileError):
        lint_file(target, LintConfig(enable=("MD999",)))


def test_format_results():
    results = lint_text("# Title\n\ntext  \n")

    assert format_results("doc.md", results) == [
        "doc.md: 3: MD009/trailing-whitespace Trailing spaces",
    ]
