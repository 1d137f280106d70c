"""Matching of document file names against @mention tokens."""
import re
from typing import Iterable

_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")
_SEPARATOR_PATTERN = re.compile(r"[_-]")


def _strip_separators(value: str) -> str:
    return _SEPARATOR_PATTERN.sub("", value)


def doc_matches_mentions(file_name: str, mentions: Iterable[str]) -> bool:
    """
    Check whether a document is referenced by any of the mentions.

    Matching is a permissive, bidirectional substring test so that partial
    references work: `@report` matches `Q3_Report_Final.pdf` and
    `@q3-report-final-v2` matches it too. Short tokens may over-match.

    Args:
        file_name: Stored document file name
        mentions: Lower-cased mention tokens (without the leading `@`)

    Returns:
        True if at least one mention refers to the document
    """
    name = file_name.lower()
    base_name = _EXTENSION_PATTERN.sub("", name)
    base_clean = _strip_separators(base_name)

    for mention in mentions:
        if not mention:
            continue
        mention_clean = _strip_separators(mention)

        if mention in name:
            return True
        if base_name and base_name in mention:
            return True
        if mention_clean and mention_clean in base_clean:
            return True
        if base_clean and base_clean in mention_clean:
            return True

    return False
