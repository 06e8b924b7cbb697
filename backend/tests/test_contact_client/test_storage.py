"""Tests for client-side key-value storage."""

from pathlib import Path

from contact_client.storage import JsonFileStorage, MemoryStorage


class TestMemoryStorage:
    def test_set_get_remove(self) -> None:
        storage = MemoryStorage()
        storage.set("k", "v")
        assert storage.get("k") == "v"

        storage.remove("k")
        assert storage.get("k") is None

    def test_initial_values_copied(self) -> None:
        initial = {"k": "v"}
        storage = MemoryStorage(initial)
        storage.set("k", "w")
        assert initial == {"k": "v"}

    def test_remove_missing_key(self) -> None:
        MemoryStorage().remove("nope")


class TestJsonFileStorage:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert JsonFileStorage(tmp_path / "state.json").get("k") is None

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "state.json"
        JsonFileStorage(path).set("contact_last_sent", "1700000000000")

        assert JsonFileStorage(path).get("contact_last_sent") == "1700000000000"

    def test_remove(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        storage.set("a", "1")
        storage.set("b", "2")

        storage.remove("a")

        assert storage.get("a") is None
        assert storage.get("b") == "2"

    def test_corrupt_file_reads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JsonFileStorage(path)

        assert storage.get("k") is None
        storage.set("k", "v")
        assert storage.get("k") == "v"

    def test_non_object_reads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonFileStorage(path).get("k") is None

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        storage.set("k", "v")
        storage.set("k", "w")

        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]
