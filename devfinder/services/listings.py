"""Listing service backends queried with a built :class:`FilterSpec`."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Protocol, Sequence

import httpx
from pydantic import ValidationError

from devfinder.config import ListingSettings
from devfinder.domain.models import ServiceProvider
from devfinder.filters import AnyOf, FilterSpec, NameContains, RateRange, SkillsContain, StatusExclusion
from devfinder.logging import logger
from devfinder.services.exceptions import ConfigurationError, ListingServiceError
from devfinder.utils.retry import retry_async

# Characters PostgREST treats as syntax inside filter values.
_POSTGREST_RESERVED = set(',.:()"\\{} ')


class ListingService(Protocol):
    async def query_listings(self, filter_spec: FilterSpec) -> list[ServiceProvider]: ...


def parse_providers(rows: Iterable[Any], *, source: str) -> list[ServiceProvider]:
    """Validate raw listing rows, skipping (and logging) rows that do not fit."""

    providers: list[ServiceProvider] = []
    for index, row in enumerate(rows):
        try:
            providers.append(ServiceProvider.model_validate(row))
        except ValidationError as exc:
            logger.warning(
                "listing_row_invalid",
                source=source,
                index=index,
                row_id=row.get("id") if isinstance(row, dict) else None,
                errors=exc.error_count(),
            )
    return providers


class InMemoryListingService:
    """Evaluates filters in-process over a fixed provider list."""

    name = "fixture"

    def __init__(self, providers: Sequence[ServiceProvider] = ()) -> None:
        self._providers = list(providers)

    @classmethod
    def from_fixture(cls, fixture_path: str | Path) -> "InMemoryListingService":
        path = Path(fixture_path)
        if not path.exists():
            raise ConfigurationError(f"Fixture file not found: {path}")
        payload = json.loads(path.read_text(encoding="utf-8"))
        rows = payload.get("developers", []) if isinstance(payload, dict) else payload
        return cls(parse_providers(rows, source=str(path)))

    async def query_listings(self, filter_spec: FilterSpec) -> list[ServiceProvider]:
        return [provider for provider in self._providers if filter_spec.matches(provider)]


def _quote(value: str) -> str:
    if not any(char in _POSTGREST_RESERVED for char in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_number(value: float) -> str:
    return format(value, "g")


def postgrest_params(
    filter_spec: FilterSpec,
    *,
    skills_match_column: str | None = None,
) -> list[tuple[str, str]]:
    """Render a filter as PostgREST query parameters (AND across parameters).

    Postgres array containment is case-sensitive. When ``skills_match_column``
    names a lowercased copy of ``skills`` (for example a generated
    ``skills_lower text[]`` column), the skill value is lowercased and matched
    against it so that skill matching ignores case like ``SkillsContain``.
    Without it, ``skills`` is matched on the query as typed.
    """

    params: list[tuple[str, str]] = [("select", "*")]
    for predicate in filter_spec.predicates:
        if isinstance(predicate, StatusExclusion):
            statuses = ",".join(sorted(status.value for status in predicate.statuses))
            params.append(("status", f"not.in.({statuses})"))
        elif isinstance(predicate, AnyOf):
            options = ",".join(
                _render_text_option(option, skills_match_column) for option in predicate.options
            )
            params.append(("or", f"({options})"))
        elif isinstance(predicate, RateRange):
            if predicate.lower is not None:
                params.append(("hourly_rate", f"gte.{_format_number(predicate.lower)}"))
            if predicate.upper is not None:
                params.append(("hourly_rate", f"lt.{_format_number(predicate.upper)}"))
    return params


def _render_text_option(option: NameContains | SkillsContain, skills_match_column: str | None) -> str:
    if isinstance(option, NameContains):
        return f"name.ilike.{_quote(f'*{option.value}*')}"
    if skills_match_column:
        return f"{skills_match_column}.cs.{{{_quote(option.value.lower())}}}"
    return f"skills.cs.{{{_quote(option.value)}}}"


class SupabaseListingService:
    """Queries the ``developers`` table through Supabase's PostgREST API."""

    name = "supabase"

    def __init__(self, http_client: httpx.AsyncClient, settings: ListingSettings) -> None:
        if settings.base_url is None:
            raise ConfigurationError("Supabase base URL is not configured.")
        self._client = http_client
        self._settings = settings

    @property
    def endpoint(self) -> str:
        return f"{str(self._settings.base_url).rstrip('/')}/rest/v1/{self._settings.table}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.api_key is not None:
            key = self._settings.api_key.get_secret_value()
            headers["apikey"] = key
            headers["Authorization"] = f"Bearer {key}"
        return headers

    async def query_listings(self, filter_spec: FilterSpec) -> list[ServiceProvider]:
        params = postgrest_params(
            filter_spec, skills_match_column=self._settings.skills_match_column
        )

        async def _request() -> httpx.Response:
            response = await self._client.get(
                self.endpoint,
                params=params,
                headers=self._headers(),
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
            return response

        try:
            response = await retry_async(
                _request,
                max_attempts=self._settings.max_attempts,
                base_delay=0.25,
                retry_on=(httpx.TransportError,),
                logger=logger,
                operation_name="listing_query",
            )
        except httpx.TimeoutException as exc:
            raise ListingServiceError("timeout") from exc
        except httpx.HTTPStatusError as exc:
            raise ListingServiceError(_describe_status_error(exc.response)) from exc
        except httpx.RequestError as exc:
            raise ListingServiceError(f"request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ListingServiceError("listing service returned invalid JSON") from exc
        if not isinstance(payload, list):
            raise ListingServiceError("listing service returned an unexpected payload")

        providers = parse_providers(payload, source=self.name)
        logger.debug(
            "listing_query_completed",
            backend=self.name,
            rows=len(payload),
            providers=len(providers),
        )
        return providers


def _describe_status_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    detail = response.text[:300].strip()
    return f"HTTP {response.status_code}: {detail}" if detail else f"HTTP {response.status_code}"


def build_listing_service(
    settings: ListingSettings,
    http_client: httpx.AsyncClient | None = None,
) -> ListingService:
    if settings.backend == "fixture":
        if settings.fixture_path is None:
            raise ConfigurationError("Fixture backend requires listing.fixture_path.")
        return InMemoryListingService.from_fixture(settings.fixture_path)
    if settings.backend == "supabase":
        if http_client is None:
            raise ConfigurationError("Supabase backend requires an HTTP client.")
        return SupabaseListingService(http_client, settings)
    raise ConfigurationError(f"Unknown listing backend: {settings.backend}")


__all__ = [
    "InMemoryListingService",
    "ListingService",
    "SupabaseListingService",
    "build_listing_service",
    "parse_providers",
    "postgrest_params",
]
