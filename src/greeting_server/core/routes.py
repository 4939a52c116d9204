"""
Static route table and the router that resolves requests against it.

The table is the single source of truth for both listener backends:
whatever HTTP library accepts the connection, it hands (method, path)
to resolve() and writes back the RouteResponse it gets.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

TEXT_PLAIN = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class RouteRule:
    """A fixed response for one (method, path) pair."""

    method: str
    path: str
    body: str
    status_code: int = 200
    content_type: str = TEXT_PLAIN


@dataclass(frozen=True)
class RouteResponse:
    """Outcome of routing a request. body=None means the library's default body."""

    status_code: int
    content_type: Optional[str] = None
    body: Optional[str] = None

    @property
    def is_default_body(self) -> bool:
        return self.body is None


NOT_FOUND = RouteResponse(status_code=404)


def build_route_table(rules: Iterable[RouteRule]) -> Tuple[RouteRule, ...]:
    """Freeze rules into a table, rejecting duplicate (method, path) pairs."""
    table = tuple(rules)
    seen = set()
    for rule in table:
        key = (rule.method, rule.path)
        if key in seen:
            raise ValueError(f"Duplicate route rule for {rule.method} {rule.path}")
        seen.add(key)
    return table


ROUTES = build_route_table([
    RouteRule(method="GET", path="/", body="Hello, World!\n"),
    RouteRule(method="GET", path="/evening", body="Good evening\n"),
])


def resolve(method: str, path: str, rules: Tuple[RouteRule, ...] = ROUTES) -> RouteResponse:
    """
    Map a request to exactly one outcome.

    Matching is exact and case-sensitive on both method and path, in
    registration order. Anything not in the table is NOT_FOUND, including
    non-GET methods on a known path.
    """
    for rule in rules:
        if rule.method == method and rule.path == path:
            return RouteResponse(
                status_code=rule.status_code,
                content_type=rule.content_type,
                body=rule.body,
            )
    return NOT_FOUND
