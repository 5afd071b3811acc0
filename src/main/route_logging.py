from collections import Counter

from fastapi import FastAPI
from fastapi.routing import APIRoute

from loggers import get_logger

logger = get_logger(__name__)

DOCS_PATHS = frozenset({"/openapi.json", "/docs", "/docs/oauth2-redirect", "/redoc"})
DOCS_ROUTE_NAMES = frozenset({"swagger_ui_html", "swagger_ui_redirect", "redoc_html"})


def _is_docs_route(route: APIRoute) -> bool:
    if getattr(route, "path", None) in DOCS_PATHS:
        return True
    name = getattr(route, "name", "") or ""
    return name.startswith("openapi") or name in DOCS_ROUTE_NAMES


def log_routes_summary(application: FastAPI, include_debug_list: bool = False) -> None:
    """Log how many API routes are mounted, grouped by method and tag."""
    routes = [
        r
        for r in application.routes
        if isinstance(r, APIRoute) and not _is_docs_route(r)
    ]

    by_method: Counter[str] = Counter()
    by_tag: Counter[str] = Counter()
    for r in routes:
        by_method.update(r.methods or ())
        by_tag.update([str(t) for t in r.tags] or ["<untagged>"])

    logger.info(
        "API endpoints summary: total=%s methods=%s tags=%s",
        len(routes),
        dict(by_method),
        dict(by_tag),
    )

    if include_debug_list:
        for r in sorted(routes, key=lambda x: (x.path, min(x.methods or {""}))):
            logger.debug("Route: %s %s -> %s", ",".join(sorted(r.methods)), r.path, r.name)
