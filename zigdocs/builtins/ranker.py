"""Keyword ranking over the builtin function list."""

from zigdocs.types import BuiltinFunction, ScoredBuiltin

USAGE_PROMPT = (
    "Please provide a function name or keywords. Try searching for a function name like "
    "'@addWithOverflow' or keywords like 'overflow' or 'atomic'."
)

EXACT_SCORE = 1000
PREFIX_SCORE = 500
SUBSTRING_SCORE = 300
# Shorter names win ties: bonus is max(0, SHORT_NAME_BONUS - len(name))
SHORT_NAME_BONUS = 50


def score(function: BuiltinFunction, query: str) -> int:
    """Relevance of one builtin for a lower-cased, stripped query; 0 means no match."""
    name = function.func.lower()
    if name == query:
        base = EXACT_SCORE
    elif name.startswith(query):
        base = PREFIX_SCORE
    elif query in name:
        base = SUBSTRING_SCORE
    else:
        return 0
    return base + max(0, SHORT_NAME_BONUS - len(function.func))


def rank(functions: list[BuiltinFunction], query: str) -> list[ScoredBuiltin]:
    """Matching builtins, best first.

    Matching is case-insensitive. Equal scores keep list order. An empty or
    whitespace-only query matches nothing; callers show USAGE_PROMPT instead.
    """
    needle = query.strip().lower()
    if not needle:
        return []
    scored = [ScoredBuiltin(function=f, score=s) for f in functions if (s := score(f, needle)) > 0]
    return sorted(scored, key=lambda item: item.score, reverse=True)
