"""Route auto-discovery.

Conventions:
- Route modules live under `imagehoster/routes/` and each exports `router: APIRouter`.
- Files starting with `_` are ignored.
- A router without its own prefix may export `ROUTER_CONFIG = {"prefix": ...}`;
  otherwise the prefix is derived from the file path (`routes/users.py` -> `/users`).
  Pages served at the site root set `ROUTER_CONFIG = {"prefix": ""}`.
- Any other `ROUTER_CONFIG` keys are passed through to `include_router(...)`.
"""

import importlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)

_CONFIG_PREFIX_KEY = "prefix"


class RouterDiscoveryError(Exception):
    """Raised when router discovery fails."""


def _iter_route_files(routes_dir: Path) -> list[Path]:
    return sorted(
        (
            py_file
            for py_file in routes_dir.rglob("*.py")
            if py_file.is_file() and not py_file.name.startswith("_")
        ),
        key=lambda path: path.as_posix(),
    )


def _module_path(routes_dir: Path, py_file: Path) -> str:
    """`imagehoster/routes/images.py` -> `imagehoster.routes.images`."""
    rel_module = ".".join(py_file.relative_to(routes_dir).with_suffix("").parts)
    return f"{routes_dir.parent.name}.{routes_dir.name}.{rel_module}"


def _load_module_router(py_file: Path, module_path: str) -> tuple[APIRouter, dict[str, Any]]:
    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        msg = (
            f"Failed to import route module '{module_path}'.\n"
            f"  File: {py_file}\n"
            f"  Hint: Ensure the package is importable and dependencies are installed"
        )
        raise RouterDiscoveryError(msg) from e

    router = getattr(module, "router", None)
    if not isinstance(router, APIRouter):
        msg = (
            f"Route module '{module_path}' must export 'router' as an APIRouter instance.\n"
            f"  File: {py_file}\n"
            f"  Found: {type(router).__name__}"
        )
        raise RouterDiscoveryError(msg)

    router_config = getattr(module, "ROUTER_CONFIG", {})
    if not isinstance(router_config, Mapping):
        msg = f"ROUTER_CONFIG in '{module_path}' must be a mapping, got {type(router_config).__name__}"
        raise RouterDiscoveryError(msg)

    return router, dict(router_config)


def discover_routers(routes_dir: Path) -> list[tuple[APIRouter, dict[str, Any]]]:
    """Discover routers under a routes directory.

    Returns a list of `(router, include_kwargs)` pairs. The router's own prefix
    wins; `ROUTER_CONFIG['prefix']` and then the file path are used only when
    it has none, so a prefix is never applied twice.
    """
    routers: list[tuple[APIRouter, dict[str, Any]]] = []

    for py_file in _iter_route_files(routes_dir):
        module_path = _module_path(routes_dir, py_file)
        router, router_config = _load_module_router(py_file, module_path)

        include_kwargs = {k: v for k, v in router_config.items() if k != _CONFIG_PREFIX_KEY}
        if not router.prefix:
            prefix = router_config.get(
                _CONFIG_PREFIX_KEY, "/" + py_file.relative_to(routes_dir).with_suffix("").as_posix()
            )
            if not isinstance(prefix, str):
                msg = f"ROUTER_CONFIG['prefix'] in '{module_path}' must be a string"
                raise RouterDiscoveryError(msg)
            include_kwargs[_CONFIG_PREFIX_KEY] = prefix
        if not router.tags and "tags" not in include_kwargs:
            include_kwargs["tags"] = [py_file.stem]

        routers.append((router, include_kwargs))

    return routers


def register_routers(app: FastAPI, routes_dir: Path | None = None) -> None:
    """Discover and register routers with a FastAPI app.

    Fails fast on startup if a route module can't be imported or doesn't export a
    valid `router`.
    """
    if routes_dir is None:
        routes_dir = Path(__file__).parent.parent / "routes"

    if not routes_dir.exists():
        msg = f"Routes directory not found: {routes_dir}"
        raise FileNotFoundError(msg)

    logger.info("Discovering routes in: %s", routes_dir)

    routers = discover_routers(routes_dir)
    if not routers:
        logger.warning("No routers discovered in %s", routes_dir)
        return

    for router, config in routers:
        app.include_router(router, **config)
        effective_prefix = config.get(_CONFIG_PREFIX_KEY, router.prefix) or "/"
        logger.info("  - %s (tags: %s)", effective_prefix, config.get("tags") or list(router.tags))
