"""Constants used across the mdstyle package."""

from __future__ import annotations

import re

# Line handling
NEWLINE_PATTERN = re.compile(r"\r\n|\r|\n")
FENCE_PATTERN = re.compile(r"^(```|~~~)")

# Heading patterns
CLOSED_ATX_SUFFIX_PATTERN = re.compile(r"#\s*$")
ATX_NO_SPACE_PATTERN = re.compile(r"^#+[^#\s]")
ATX_MULTI_SPACE_PATTERN = re.compile(r"^#+\s\s")
CLOSED_ATX_PATTERN = re.compile(r"^#+[^#]*[^\\]#+$")
CLOSED_ATX_NO_SPACE_END_PATTERN = re.compile(r"[^#\s]#+$")
CLOSED_ATX_MULTI_SPACE_END_PATTERN = re.compile(r"\s\s#+$")
SETEXT_UNDERLINE_PATTERN = re.compile(r"^(-+|=+)\s*$")

# List patterns
LIST_MARKER_PATTERN = re.compile(r"^([*+\-]|(\d+\.))\s")
LIST_MARKER_SPACING_PATTERN = re.compile(r"^\s*\S+(\s+)")

# Inline and code patterns
REVERSED_LINK_PATTERN = re.compile(r"\([^)]+\)\[[^\]]+\]")
DOLLAR_PROMPT_PATTERN = re.compile(r"^\$\s")
BLOCKQUOTE_MULTI_SPACE_PATTERN = re.compile(r"^\s*>\s\s")

# Defaults
DEFAULT_LINE_LENGTH = 80
DEFAULT_LIST_INDENT = 2
DEFAULT_PUNCTUATION = ".,;:!?"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
