"""Fuzzy relevance search over the documentation index.

Scoring is an ordered list of independent rules. Each rule looks at one
index entry and yields points plus an optional match source:

- exact name (100) and exact title (90) match short-circuit everything else
- name, title and description prefix/substring matches add up
- keyword matches add per keyword; component-style keywords report
  ``examples`` as their source
- a name within two edits adds a small fuzzy bonus

The first rule to name a match source wins and entries scoring 0 are dropped.
Exact matches rank ahead of every partial match, whatever its point total.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pipelines.models import Index, IndexEntry

from .fuzzy import levenshtein

logger = logging.getLogger(__name__)

COMPONENT_NAME = re.compile(r"^[a-z][a-z0-9.-]*$")
DEFAULT_MATCH_SOURCE = "keyword"
MAX_FUZZY_DISTANCE = 2


@dataclass(frozen=True)
class RuleOutcome:
    points: int
    match_source: Optional[str] = None
    stop: bool = False


@dataclass(frozen=True)
class Candidate:
    """Lowercased view of an index entry being scored against a query."""
    query: str
    name: str
    title: str
    description: str
    keywords: Tuple[str, ...]

    @classmethod
    def of(cls, query: str, entry: IndexEntry) -> "Candidate":
        return cls(
            query=query,
            name=entry.name.lower(),
            title=entry.title.lower(),
            description=entry.description.lower(),
            keywords=tuple(k.lower() for k in entry.keywords),
        )


Rule = Callable[[Candidate], Optional[RuleOutcome]]


def exact_name(c: Candidate) -> Optional[RuleOutcome]:
    if c.name == c.query:
        return RuleOutcome(100, "name", stop=True)
    return None


def exact_title(c: Candidate) -> Optional[RuleOutcome]:
    if c.title == c.query:
        return RuleOutcome(90, "title", stop=True)
    return None


def name_match(c: Candidate) -> Optional[RuleOutcome]:
    if c.name.startswith(c.query):
        return RuleOutcome(70, "name")
    if c.query in c.name:
        return RuleOutcome(50, "name")
    return None


def title_match(c: Candidate) -> Optional[RuleOutcome]:
    if c.title.startswith(c.query):
        return RuleOutcome(40, "title")
    if c.query in c.title:
        return RuleOutcome(30, "title")
    return None


def description_match(c: Candidate) -> Optional[RuleOutcome]:
    if c.query in c.description:
        return RuleOutcome(20, "description")
    return None


def keyword_match(c: Candidate) -> Optional[RuleOutcome]:
    points = 0
    source = None
    query_is_component = bool(COMPONENT_NAME.match(c.query))
    for keyword in c.keywords:
        if keyword == c.query:
            points += 15
        elif c.query in keyword:
            points += 10
        else:
            continue
        # component-style keywords come from example code
        if query_is_component and COMPONENT_NAME.match(keyword):
            source = "examples"
    return RuleOutcome(points, source) if points else None


def fuzzy_name(c: Candidate) -> Optional[RuleOutcome]:
    distance = levenshtein(c.query, c.name)
    if 0 < distance <= MAX_FUZZY_DISTANCE:
        return RuleOutcome(max(0, 25 - distance * 10), "fuzzy")
    return None


SCORING_RULES: Tuple[Rule, ...] = (
    exact_name,
    exact_title,
    name_match,
    title_match,
    description_match,
    keyword_match,
    fuzzy_name,
)


@dataclass(frozen=True)
class SearchResult:
    entry: IndexEntry
    score: int
    match_source: str
    matched_query: str
    exact: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = self.entry.to_dict()
        result.update({
            "score": self.score,
            "match_source": self.match_source,
            "matched_query": self.matched_query,
        })
        return result


def normalize_query(query: str) -> str:
    return query.strip().lower()


def evaluate(query: str, entry: IndexEntry, rules: Tuple[Rule, ...] = SCORING_RULES) -> Tuple[int, str, bool]:
    """Score one entry against an already normalized query.

    Returns:
        Tuple of (score, match_source, exact) where ``exact`` is set when a
        short-circuiting rule matched
    """
    candidate = Candidate.of(query, entry)
    score = 0
    source: Optional[str] = None
    for rule in rules:
        outcome = rule(candidate)
        if outcome is None:
            continue
        score += outcome.points
        if source is None:
            source = outcome.match_source
        if outcome.stop:
            return score, source, True
    return score, source or DEFAULT_MATCH_SOURCE, False


def score_entry(query: str, entry: IndexEntry, rules: Tuple[Rule, ...] = SCORING_RULES) -> Tuple[int, str]:
    score, source, _ = evaluate(query, entry, rules)
    return score, source


class SearchEngine:
    """Ranks index entries against free-text queries."""

    def __init__(self, index: Optional[Index], rules: Tuple[Rule, ...] = SCORING_RULES):
        self.index = index
        self.rules = rules

    @classmethod
    def from_store(cls, store) -> "SearchEngine":
        return cls(store.load_index())

    def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        """Search the index.

        Args:
            query: Search text, compared case-insensitively after trimming
            limit: Maximum number of results

        Returns:
            Exact matches first, then descending score; equal scores keep
            index order
        """
        query = normalize_query(query)
        if not query or self.index is None or not self.index.items:
            return []

        results = []
        for entry in self.index.items:
            score, source, exact = evaluate(query, entry, self.rules)
            if score > 0:
                results.append(SearchResult(entry=entry, score=score, match_source=source,
                                            matched_query=query, exact=exact))

        results.sort(key=lambda r: (r.exact, r.score), reverse=True)
        logger.debug(f"Search '{query}': {len(results)} matches")
        return results[:max(limit, 0)]
