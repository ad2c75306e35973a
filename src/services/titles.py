"""
Title extraction from utterances.

Both functions are pure folds over the parsed expressions: every step builds a
new string from the previous one.
"""

import re
from functools import reduce

from core.config import SEARCH_ACTION_VERBS
from models.events import ParsedTemporalExpression

ACTION_VERB_PATTERN = re.compile(
    r"\b(?:" + "|".join(SEARCH_ACTION_VERBS) + r")\b", re.IGNORECASE
)
WHITESPACE = re.compile(r"\s+")


def _squash(text: str) -> str:
    return WHITESPACE.sub(" ", text).strip()


def _cut(text: str, span: str) -> str:
    """Remove the first occurrence of span, joining what was around it with one space."""
    index = text.find(span) if span else -1
    if index < 0:
        return text
    head = text[:index].rstrip()
    tail = text[index + len(span):].lstrip()
    return f"{head} {tail}" if head and tail else head or tail


def extract_title(utterance: str, expressions: list[ParsedTemporalExpression]) -> str:
    """
    Remove the first occurrence of each matched span and return what is left.

    "lunch with Sam tomorrow at noon" with the span "tomorrow at noon" gives
    "lunch with Sam". An utterance made only of temporal text gives "".
    """
    return reduce(
        lambda title, expression: _cut(title, expression.matched_text),
        expressions,
        utterance.strip(),
    )


def normalize_search_title(
    utterance: str, expressions: list[ParsedTemporalExpression]
) -> str:
    """
    Build the lowercase key used to match an utterance against event titles.

    Removes every matched span and the verbs cancel/delete/remove.
    """
    lowered = reduce(
        lambda text, expression: text.replace(expression.matched_text.lower(), " "),
        expressions,
        utterance.lower(),
    )
    return _squash(ACTION_VERB_PATTERN.sub(" ", lowered))
