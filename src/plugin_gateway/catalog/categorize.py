"""Keyword-based categorization for operations reported without a category."""

import re

# Category keyword mappings, checked in declaration order
CATEGORY_KEYWORDS = {
    "filesystem": ["file", "read", "write", "directory", "folder", "path", "open", "save"],
    "vcs": ["git", "commit", "branch", "diff", "merge", "worktree", "checkout"],
    "shell": ["bash", "shell", "command", "exec", "execute", "terminal", "process"],
    "web": ["http", "request", "api", "fetch", "download", "url", "web", "scrape"],
    "database": ["database", "query", "sql", "select", "insert", "table"],
    "math": ["calculate", "compute", "math", "arithmetic", "sum", "average", "statistics"],
    "core": ["help", "list", "capabilities", "tools"],
}

_WORD_SPLIT = re.compile(r"[^a-z0-9]+")


def extract_categories(text: str | None) -> list[str]:
    """Extract matching categories from free text, in table order.

    Underscores and other separators count as word boundaries, so
    ``read_file`` matches both ``read`` and ``file``.

    Args:
        text: Operation name, description, or any other text.

    Returns:
        List of matched category names.
    """
    if not text:
        return []

    words = set(word for word in _WORD_SPLIT.split(text.lower()) if word)
    matched: list[str] = []
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in words for keyword in keywords):
            matched.append(category)
    return matched


def infer_category(name: str, description: str | None = None) -> str | None:
    """Pick a single category for an operation.

    The name is consulted before the description so that ``git_commit``
    described as "Write a commit" lands in ``vcs`` rather than ``filesystem``.
    """
    for text in (name, description):
        categories = extract_categories(text)
        if categories:
            return categories[0]
    return None
