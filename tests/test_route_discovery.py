"""Route auto-discovery."""

from pathlib import Path

import pytest
from fastapi import FastAPI

import imagehoster.main
from imagehoster.core.route_discovery import RouterDiscoveryError, discover_routers

ROUTES_DIR = Path(imagehoster.main.__file__).parent / "routes"


def test_discovers_every_route_module() -> None:
    routers = discover_routers(ROUTES_DIR)

    tags = sorted(tag for router, config in routers for tag in (config.get("tags") or router.tags))
    assert tags == ["comments", "health", "home", "images", "users"]


def test_root_pages_keep_empty_prefix() -> None:
    configs = {router.tags[0]: config for router, config in discover_routers(ROUTES_DIR)}

    assert configs["home"]["prefix"] == ""
    assert configs["health"]["prefix"] == ""
    # routers that declare their own prefix are not prefixed again
    assert "prefix" not in configs["users"]


def test_app_serves_discovered_paths() -> None:
    app: FastAPI = imagehoster.main.app
    paths = {route.path for route in app.routes}

    assert {"/", "/health", "/users/login", "/users/registration", "/users/logout"} <= paths
    assert {"/images", "/images/upload", "/images/{image_id}/{title}"} <= paths
    assert "/images/{image_id}/{title}/comments" in paths


def test_unimportable_route_module_fails(tmp_path: Path) -> None:
    routes_dir = tmp_path / "routes"
    routes_dir.mkdir()
    (routes_dir / "broken.py").write_text("value = 1\n")

    with pytest.raises(RouterDiscoveryError):
        discover_routers(routes_dir)
