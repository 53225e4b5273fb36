"""
Unit tests for the storefront building blocks.

Tests key features including:
- Pagination window arithmetic
- sortOrder parsing
- Slugs
- App construction without a database
"""

from unittest.mock import Mock

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient

from storecheck.config import StoreConfig
from storecheck.exceptions import DatabaseError
from storecheck.store import build_app
from storecheck.store.app import (
    ExceptionHandlerDefinition,
    RouterDefinition,
    StoreBuilder,
    _database_error,
)
from storecheck.store.models import Product, slugify
from storecheck.store.routes import REQUEST_FAILED, page_window, parse_sort_order


@pytest.mark.unit
class TestPageWindow:
    @pytest.mark.parametrize(
        "count,page,limit,expected",
        [
            (25, 1, 10, (0, 1, 3)),
            (25, 2, 10, (10, 2, 3)),
            (25, 3, 10, (20, 3, 3)),
            (10, 1, 10, (0, 1, 1)),
            (5, 3, 10, (0, 1, 1)),
            (0, 1, 10, (0, 1, 0)),
            (11, 2, 10, (10, 2, 2)),
        ],
    )
    def test_window(self, count, page, limit, expected):
        assert page_window(count, page, limit) == expected


@pytest.mark.unit
class TestParseSortOrder:
    def test_default_is_newest_first(self):
        (clause,) = parse_sort_order(None)
        assert str(clause) == str(Product.created.desc())

    def test_ascending_and_descending(self):
        clauses = parse_sort_order('{"price": 1, "created": -1}')
        assert [str(c) for c in clauses] == [
            str(Product.price.asc()),
            str(Product.created.desc()),
        ]

    def test_unknown_keys_ignored(self):
        (clause,) = parse_sort_order('{"password": 1}')
        assert str(clause) == str(Product.created.desc())

    @pytest.mark.parametrize("raw", ["[1, 2]", '"created"', "not json"])
    def test_rejects_non_objects(self, raw):
        with pytest.raises(ValueError):
            parse_sort_order(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            '{"price": Infinity}',
            '{"price": -Infinity}',
            '{"price": NaN}',
            '{"price": "up"}',
            '{"price": null}',
        ],
    )
    def test_rejects_bad_directions(self, raw):
        with pytest.raises(ValueError):
            parse_sort_order(raw)


@pytest.mark.unit
class TestSlugify:
    @pytest.mark.parametrize(
        "name,slug",
        [
            ("RMIT Tee", "rmit-tee"),
            ("RMIT Tee (Blue)", "rmit-tee-blue"),
            ("  T--Shirts  ", "t-shirts"),
            ("!!!", "item"),
        ],
    )
    def test_slugify(self, name, slug):
        assert slugify(name) == slug


@pytest.mark.unit
class TestBuildApp:
    def test_health_needs_no_database(self):
        client = TestClient(build_app(Mock()))
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_app_state(self, lg):
        connection = Mock()
        cfg = StoreConfig(secret="s")
        app = build_app(connection, cfg, lg)
        assert app.state.connection is connection
        assert app.state.store is cfg
        assert app.state.lg.name == "/test/store"

    def test_routes_mounted(self):
        paths = set(build_app(Mock()).openapi()["paths"])
        assert {"/api/auth/login", "/api/product/list", "/api/health"} <= paths

    def test_cors_headers(self):
        client = TestClient(build_app(Mock()))
        response = client.get("/api/health", headers={"Origin": "http://shop.test"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_database_error_becomes_400(self, lg):
        router = APIRouter()

        @router.get("/boom")
        def boom():
            raise DatabaseError("connection is closed")

        app = (
            StoreBuilder(StoreConfig())
            .add_exception_handler(
                ExceptionHandlerDefinition(DatabaseError, _database_error)
            )
            .add_router(RouterDefinition(router, prefix="/api"))
            .build(Mock(), lg)
        )
        response = TestClient(app).get("/api/boom")
        assert response.status_code == 400
        assert response.json() == {"error": REQUEST_FAILED}
