"""Metadata derivation for docs-folder files.

Title comes from the first top-level markdown heading, falling back to the
file name. Category comes from an ordered list of rules matched against the
lower-cased file name; the first matching rule wins.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Tuple

from docsync.config import CategoryRuleConfig
from docsync.models import DocumentMetadata

DEFAULT_EXTENSION = ".md"
DEFAULT_CATEGORY = "Docs"

_HEADING_RE = re.compile(r"^#\s+(\S.*)$")


@dataclass(frozen=True)
class CategoryRule:
    """Assigns `label` when `predicate(lower_cased_name)` is true."""

    label: str
    predicate: Callable[[str], bool]


def keyword_rule(label: str, *keywords: str) -> CategoryRule:
    """Rule matching names that contain any of the keywords."""
    needles = tuple(k.lower() for k in keywords)
    return CategoryRule(label=label, predicate=lambda name: any(n in name for n in needles))


# Order matters: "watchlist-backup.md" is Research, not System.
DEFAULT_CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    keyword_rule("Research", "watchlist", "strategic"),
    keyword_rule("System", "backup"),
)


def rules_from_config(rule_configs: Iterable[CategoryRuleConfig]) -> Tuple[CategoryRule, ...]:
    """Build category rules from configuration entries, keeping their order."""
    return tuple(keyword_rule(rule.label, *rule.keywords) for rule in rule_configs)


def extract_title(content: str, filename: str, extension: str = DEFAULT_EXTENSION) -> str:
    """
    Get the title of a document.

    Args:
        content: Full file text.
        filename: File base name.
        extension: Suffix stripped from the name when there is no heading.

    Returns:
        Text of the first "# " heading, trimmed, or the name without extension.
    """
    for line in content.splitlines():
        match = _HEADING_RE.match(line)
        if match:
            return match.group(1).strip()

    if filename.lower().endswith(extension.lower()):
        return filename[: -len(extension)]
    return filename


def assign_category(
    filename: str,
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
    default: str = DEFAULT_CATEGORY,
) -> str:
    """Return the label of the first rule matching the lower-cased name."""
    name = filename.lower()
    for rule in rules:
        if rule.predicate(name):
            return rule.label
    return default


def byte_size(content: str) -> int:
    """UTF-8 byte length, not character count."""
    return len(content.encode("utf-8"))


def derive_metadata(
    content: str,
    filename: str,
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
    default_category: str = DEFAULT_CATEGORY,
    extension: str = DEFAULT_EXTENSION,
) -> DocumentMetadata:
    """Derive title, category and size for one file."""
    return DocumentMetadata(
        title=extract_title(content, filename, extension),
        category=assign_category(filename, rules, default_category),
        size=byte_size(content),
    )
