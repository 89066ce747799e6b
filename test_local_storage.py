"""
Key-value storage backends
"""
import pytest

from app.services.local_storage import FileStorage, LocalStorage, MemoryStorage


class TestMemoryStorage:

    def test_values_do_not_alias_caller_data(self):
        storage = MemoryStorage()
        users = [{"id": "user1", "team_ids": ["team1"]}]

        storage.set_item("users", users)
        users[0]["team_ids"].append("team2")

        stored = storage.get_item("users")
        assert stored == [{"id": "user1", "team_ids": ["team1"]}]
        stored.append({"id": "user2"})
        assert len(storage.get_item("users")) == 1

    def test_missing_and_removed_keys(self):
        storage = MemoryStorage()
        assert storage.get_item("teams") is None

        storage.set_item("teams", [])
        storage.remove_item("teams")
        storage.remove_item("teams")
        assert storage.get_item("teams") is None


class TestFileStorage:

    def test_round_trip_on_disk(self, tmp_path):
        FileStorage(str(tmp_path)).set_item("departments", [{"id": "dept1", "name": "Gente & Gestão"}])

        reopened = FileStorage(str(tmp_path))
        assert reopened.get_item("departments") == [{"id": "dept1", "name": "Gente & Gestão"}]
        assert (tmp_path / "departments.json").exists()
        assert not list(tmp_path.glob(".tmp-*"))

    def test_corrupt_file_reads_as_missing(self, tmp_path):
        (tmp_path / "users.json").write_text("[{not json", encoding="utf-8")
        assert FileStorage(str(tmp_path)).get_item("users") is None

    def test_unsafe_key_stays_inside_directory(self, tmp_path):
        storage = FileStorage(str(tmp_path / "data"))
        storage.set_item("../escape", {"x": 1})

        assert storage.get_item("../escape") == {"x": 1}
        assert not (tmp_path / "escape.json").exists()

    def test_clear(self, tmp_path):
        storage = FileStorage(str(tmp_path))
        storage.set_item("users", [])
        storage.set_item("teams", [])

        storage.clear()

        assert storage.get_item("users") is None
        assert list(tmp_path.glob("*.json")) == []


class TestLocalStorageInterface:

    def test_incomplete_backend_cannot_be_created(self):
        class ReadOnlyStorage(LocalStorage):
            def get_item(self, key):
                return None

        with pytest.raises(TypeError):
            ReadOnlyStorage()
