"""Relevance scoring of catalog operations against a free-text query."""

from typing import Callable, Iterable

from plugin_gateway.catalog.schemas import OperationDescriptor

from .schemas import ScoringWeights


def normalize_query(query: str | None) -> str | None:
    """Lower-case and strip a query; blank queries become None."""
    if query is None:
        return None
    query = query.strip().lower()
    return query or None


def text_match_score(
    descriptor: OperationDescriptor,
    query_lower: str,
    weights: ScoringWeights,
) -> float:
    """Score name, description and keyword substring matches."""
    score = 0.0
    if query_lower in descriptor.name.lower():
        score += weights.name
    if query_lower in descriptor.description.lower():
        score += weights.description
    for keyword in descriptor.keywords:
        if query_lower in keyword.lower():
            score += weights.keyword
    return score


def score_operation(
    descriptor: OperationDescriptor,
    query_lower: str,
    usage_count: int,
    weights: ScoringWeights,
) -> float:
    """Total relevance score for one operation.

    The usage bonus is only added on top of a text match, so usage can
    raise the rank of a matching operation but never makes a non-matching
    one appear.

    Returns:
        0.0 for no match, otherwise a positive score.
    """
    score = text_match_score(descriptor, query_lower, weights)
    if score <= 0:
        return 0.0
    return score + weights.usage * usage_count


def rank_operations(
    descriptors: Iterable[OperationDescriptor],
    query_lower: str,
    usage_count: Callable[[str], int],
    weights: ScoringWeights,
) -> list[tuple[OperationDescriptor, float]]:
    """Score and sort operations by relevance.

    Zero-scoring operations are dropped. The sort is stable, so equal scores
    keep the input (registration) order.
    """
    scored: list[tuple[OperationDescriptor, float]] = []
    for descriptor in descriptors:
        score = score_operation(descriptor, query_lower, usage_count(descriptor.name), weights)
        if score > 0:
            scored.append((descriptor, score))

    scored.sort(key=lambda item: item[1], reverse=True)
    return scored
