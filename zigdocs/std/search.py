"""Full-text search over the std index, delegated to the engine."""

from zigdocs.std.engine import StdIndex
from zigdocs.std.members import describe
from zigdocs.types import SearchHit


def ignore_case_for(query: str) -> bool:
    """Smart case: case-insensitive unless the query contains an uppercase letter."""
    return not any(char.isupper() for char in query)


def search(index: StdIndex, query: str) -> list[int]:
    """Matching handles in engine rank order."""
    return index.run_query(query, ignore_case=ignore_case_for(query))


def search_hits(index: StdIndex, query: str, limit: int) -> tuple[int, list[SearchHit]]:
    """Total match count and the first `limit` matches, described."""
    handles = search(index, query)
    hits = []
    for handle in handles[:limit]:
        member = describe(index, handle)
        hits.append(SearchHit(handle=handle, name=member.name, kind=member.category.label, brief=member.brief))
    return len(handles), hits
