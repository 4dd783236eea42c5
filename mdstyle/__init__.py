"""
mdstyle: rule-based style linter for Markdown files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    mdstyle README.md

Library Usage:
    from pathlib import Path
    from mdstyle import lint_text, format_results

    results = lint_text(Path("README.md").read_text())
    for line in format_results("README.md", results):
        print(line)
"""

from .config import ConfigError, LintConfig, UnknownRuleError, build_config
from .exceptions import FileTooLargeError, LintError, LintFileError
from .linter import format_results, lint_document, lint_file, lint_text, select_rules
from .models import Document, ListDescriptor, ListFilter, RuleResult, Token, TokenKind
from .rules import RULES, Rule, find_rule
from .tokens import parse_document
from .views import DocumentViews, classify_lines, flatten_lists, iter_headings

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "lint_text",
    "lint_document",
    "lint_file",
    "select_rules",
    "format_results",
    "parse_document",
    # Views
    "DocumentViews",
    "classify_lines",
    "flatten_lists",
    "iter_headings",
    # Rules
    "RULES",
    "Rule",
    "find_rule",
    # Data models
    "Document",
    "ListDescriptor",
    "ListFilter",
    "RuleResult",
    "Token",
    "TokenKind",
    # Configuration
    "LintConfig",
    "build_config",
    # Exceptions
    "ConfigError",
    "UnknownRuleError",
    "LintError",
    "LintFileError",
    "FileTooLargeError",
    # Version
    "__version__",
]
