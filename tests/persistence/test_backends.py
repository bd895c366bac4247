"""Tests for key-value storage backends."""

from pathlib import Path

import pytest

from stepflow_app.errors import PersistenceError
from stepflow_app.persistence.backends import InMemoryBackend, SQLiteBackend, UnavailableBackend


class TestInMemoryBackend:
    """Test InMemoryBackend."""

    def test_get_set_remove(self):
        backend = InMemoryBackend()

        assert backend.get("k") is None
        backend.set("k", "v")
        assert backend.get("k") == "v"
        backend.remove("k")
        assert backend.get("k") is None

    def test_initial_data_is_copied(self):
        initial = {"k": "v"}
        backend = InMemoryBackend(initial)
        backend.remove("k")

        assert initial == {"k": "v"}
        assert backend.health_check() is True


class TestUnavailableBackend:
    """Test UnavailableBackend."""

    @pytest.mark.parametrize("call,args", [
        ("get", ("k",)), ("set", ("k", "v")), ("remove", ("k",))
    ])
    def test_every_call_raises(self, call, args):
        backend = UnavailableBackend("disabled in settings")

        with pytest.raises(PersistenceError) as excinfo:
            getattr(backend, call)(*args)

        assert excinfo.value.operation == call
        assert excinfo.value.target == "k"
        assert str(excinfo.value) == "disabled in settings"

    def test_health_check(self):
        assert UnavailableBackend().health_check() is False


class TestSQLiteBackend:
    """Test SQLiteBackend class."""

    def test_init_database(self, tmp_path):
        """Test database initialization."""
        db_path = tmp_path / "test_progress.db"
        store = SQLiteBackend(str(db_path))

        assert Path(db_path).exists()
        with store._get_connection() as conn:
            cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = [row[0] for row in cursor.fetchall()]
            assert "progress" in tables

    def test_set_overwrites(self, tmp_path):
        store = SQLiteBackend(str(tmp_path / "p.db"))

        store.set("userProgress", "one")
        store.set("userProgress", "two")

        assert store.get("userProgress") == "two"
        with store._get_connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM progress").fetchone()[0]
        assert count == 1

    def test_value_survives_new_instance(self, tmp_path):
        db_path = str(tmp_path / "p.db")
        SQLiteBackend(db_path).set("userProgress", "kept")

        assert SQLiteBackend(db_path).get("userProgress") == "kept"

    def test_remove_missing_key(self, tmp_path):
        store = SQLiteBackend(str(tmp_path / "p.db"))
        store.remove("absent")
        assert store.get("absent") is None

    def test_unopenable_database_raises_persistence_error(self, tmp_path):
        with pytest.raises(PersistenceError) as excinfo:
            SQLiteBackend(str(tmp_path / "missing" / "dir" / "p.db"))

        assert excinfo.value.operation == "sqlite"

    def test_health_check(self, tmp_path):
        assert SQLiteBackend(str(tmp_path / "p.db")).health_check() is True
