"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import create_engine, text

from serve_api.config.loader import ServeConfig
from serve_api.server.app import create_app


@pytest.fixture
def store_path(tmp_path):
    """Create a SQLite store file with small tables t, u and blobs."""
    db_file = tmp_path / "sqlite.db"
    engine = create_engine(f"sqlite:///{db_file}", echo=False)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE t (a INTEGER, b TEXT)"))
        conn.execute(
            text("INSERT INTO t (a, b) VALUES (:a, :b)"),
            [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}, {"a": 3, "b": "z"}],
        )
        conn.execute(text("CREATE TABLE u (id INTEGER, name TEXT, score REAL, note TEXT)"))
        conn.execute(
            text("INSERT INTO u (id, name, score, note) VALUES (:id, :name, :score, :note)"),
            [
                {"id": 10, "name": "alpha", "score": 1.5, "note": None},
                {"id": 20, "name": "beta", "score": -0.25, "note": "ok"},
            ],
        )
        conn.execute(text("CREATE TABLE blobs (id INTEGER, payload BLOB)"))
        conn.execute(
            text("INSERT INTO blobs (id, payload) VALUES (:id, :payload)"),
            [{"id": 1, "payload": b"\x00\xff"}],
        )
    engine.dispose()
    return str(db_file)


@pytest.fixture
def serve_config(store_path, tmp_path):
    static_dir = tmp_path / "www"
    static_dir.mkdir()
    return ServeConfig(directory=str(static_dir), database=store_path)


@pytest.fixture
def app(serve_config):
    flask_app = create_app(serve_config)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
