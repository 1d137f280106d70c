"""Parsing of @mentions that point a query at specific documents."""
import logging
import re

from models.query import ParsedQuery

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@([^\s@]+)")


def parse_mentions(query: str) -> ParsedQuery:
    """
    Extract `@name` tokens from a query.

    Args:
        query: Raw user query, e.g. "@report what was the revenue?"

    Returns:
        ParsedQuery with lower-cased mentions in order of appearance and the
        query text with every mention removed
    """
    mentions = [match.lower() for match in MENTION_PATTERN.findall(query)]

    if mentions:
        clean_query = " ".join(MENTION_PATTERN.sub("", query).split())
    else:
        clean_query = query.strip()

    logger.debug(f"Parsed mentions: {', '.join(mentions) if mentions else 'none'}")
    return ParsedQuery(query=query, mentions=mentions, clean_query=clean_query)
