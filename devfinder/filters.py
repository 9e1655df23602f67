"""Translate raw search inputs into a structured listing filter.

Everything here is pure: the same inputs always produce an equal
:class:`FilterSpec`, and no input can make :func:`build_filter` fail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from devfinder.domain.models import (
    UNAVAILABLE_STATUSES,
    AvailabilityStatus,
    PriceBucket,
    ServiceProvider,
)

LOW_UPPER_BOUND = 0.3
HIGH_LOWER_BOUND = 0.6


@dataclass(frozen=True, slots=True)
class StatusExclusion:
    statuses: frozenset[AvailabilityStatus]

    def matches(self, provider: ServiceProvider) -> bool:
        return provider.availability_status not in self.statuses


@dataclass(frozen=True, slots=True)
class NameContains:
    value: str

    def matches(self, provider: ServiceProvider) -> bool:
        return self.value.casefold() in provider.name.casefold()


@dataclass(frozen=True, slots=True)
class SkillsContain:
    value: str

    def matches(self, provider: ServiceProvider) -> bool:
        needle = self.value.casefold()
        return any(skill.casefold() == needle for skill in provider.skills)


@dataclass(frozen=True, slots=True)
class RateRange:
    """Half-open ``[lower, upper)`` range; ``None`` leaves that side unbounded."""

    lower: float | None = None
    upper: float | None = None

    def matches(self, provider: ServiceProvider) -> bool:
        rate = provider.hourly_rate
        if self.lower is not None and rate < self.lower:
            return False
        if self.upper is not None and rate >= self.upper:
            return False
        return True


@dataclass(frozen=True, slots=True)
class AnyOf:
    options: tuple[Union[NameContains, SkillsContain], ...]

    def matches(self, provider: ServiceProvider) -> bool:
        return any(option.matches(provider) for option in self.options)


Predicate = Union[StatusExclusion, AnyOf, RateRange]

PRICE_BUCKET_RANGES: dict[PriceBucket, RateRange] = {
    PriceBucket.low: RateRange(upper=LOW_UPPER_BOUND),
    PriceBucket.medium: RateRange(lower=LOW_UPPER_BOUND, upper=HIGH_LOWER_BOUND),
    PriceBucket.high: RateRange(lower=HIGH_LOWER_BOUND),
}


@dataclass(frozen=True, slots=True)
class FilterSpec:
    text_query: str | None = None
    price_bucket: PriceBucket | None = None
    predicates: tuple[Predicate, ...] = field(default=())

    def matches(self, provider: ServiceProvider) -> bool:
        return all(predicate.matches(provider) for predicate in self.predicates)


def classify_rate(rate: float) -> PriceBucket:
    """Return the bucket an hourly rate falls into."""

    for bucket, rate_range in PRICE_BUCKET_RANGES.items():
        if (rate_range.lower is None or rate >= rate_range.lower) and (
            rate_range.upper is None or rate < rate_range.upper
        ):
            return bucket
    raise ValueError(f"Rate {rate!r} does not fall into any price bucket")


def build_filter(
    text_query: str | None = None,
    price_bucket: PriceBucket | str | None = None,
) -> FilterSpec:
    query = (text_query or "").strip() or None
    bucket = PriceBucket(price_bucket) if price_bucket else None

    predicates: list[Predicate] = [StatusExclusion(UNAVAILABLE_STATUSES)]
    if query is not None:
        predicates.append(AnyOf((NameContains(query), SkillsContain(query))))
    if bucket is not None:
        predicates.append(PRICE_BUCKET_RANGES[bucket])

    return FilterSpec(text_query=query, price_bucket=bucket, predicates=tuple(predicates))


class FilterBuilder:
    """Callable wrapper so the builder can be injected and swapped in tests."""

    build = staticmethod(build_filter)

    def __call__(self, text_query: str | None = None, price_bucket: PriceBucket | str | None = None) -> FilterSpec:
        return build_filter(text_query, price_bucket)


__all__ = [
    "AnyOf",
    "FilterBuilder",
    "FilterSpec",
    "HIGH_LOWER_BOUND",
    "LOW_UPPER_BOUND",
    "NameContains",
    "PRICE_BUCKET_RANGES",
    "Predicate",
    "RateRange",
    "SkillsContain",
    "StatusExclusion",
    "build_filter",
    "classify_rate",
]
