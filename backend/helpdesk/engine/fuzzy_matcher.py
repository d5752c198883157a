"""Fuzzy Match Resolver - Match free text against master-data candidates"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from ..domain.models import MasterDataOption


def normalize(text: Optional[str]) -> str:
    """Lower-case, trim, collapse inner whitespace"""
    return " ".join((text or "").lower().split())


class MatchStrategy(ABC):
    """Pluggable matching strategy"""

    @abstractmethod
    def find_best_match(
        self,
        query: Optional[str],
        candidates: Sequence[MasterDataOption]
    ) -> Optional[MasterDataOption]:
        """Return the best candidate or None"""


def _exact(query: str, label: str) -> bool:
    return label == query


def _substring(query: str, label: str) -> bool:
    return query in label or label in query


def _token_overlap(query: str, label: str) -> bool:
    label_words = label.split()
    for q in query.split():
        for w in label_words:
            if q in w or w in q:
                return True
    return False


class TieredFuzzyMatcher(MatchStrategy):
    """
    Three tiers tried in order: exact, substring, token overlap

    The first tier with a hit wins; within a tier the earliest candidate
    wins. Candidates whose display text is empty never match.
    """

    TIERS: List[Callable[[str, str], bool]] = [_exact, _substring, _token_overlap]

    def find_best_match(
        self,
        query: Optional[str],
        candidates: Sequence[MasterDataOption]
    ) -> Optional[MasterDataOption]:
        needle = normalize(query)
        if not needle or not candidates:
            return None

        labelled = [(c, normalize(c.text)) for c in candidates]
        labelled = [(c, label) for c, label in labelled if label]

        for tier in self.TIERS:
            for candidate, label in labelled:
                if tier(needle, label):
                    return candidate
        return None


_default_matcher = TieredFuzzyMatcher()


def find_best_match(
    query: Optional[str],
    candidates: Sequence[MasterDataOption]
) -> Optional[MasterDataOption]:
    return _default_matcher.find_best_match(query, candidates)
