"""Tests for saved user files."""

import pytest

from codebuddy.storage import FileStorage


@pytest.fixture
def storage(tmp_path):
    return FileStorage(tmp_path / "user_files")


class TestFileStorage:
    """Test suite for FileStorage."""

    def test_save_and_read(self, storage) -> None:
        """Test a basic save/read."""
        stored = storage.save_file("hello.py", "print('hi')\n")

        assert stored.name == "hello.py"
        assert stored.size == len("print('hi')\n")
        assert storage.read_file("hello.py") == "print('hi')\n"

    def test_overwrite(self, storage) -> None:
        """Test saving twice replaces the content."""
        storage.save_file("a.c", "int x;")
        storage.save_file("a.c", "int y;")

        assert storage.read_file("a.c") == "int y;"
        assert [f.name for f in storage.list_files()] == ["a.c"]

    def test_list_files(self, storage) -> None:
        """Test listing reports names and sizes."""
        storage.save_file("one.js", "1;")
        storage.save_file("two.php", "<?php")

        files = {f.name: f for f in storage.list_files()}

        assert set(files) == {"one.js", "two.php"}
        assert files["two.php"].size == 5
        assert set(files["one.js"].to_dict()) == {"name", "size", "last_modified"}

    def test_delete(self, storage) -> None:
        """Test deleting a file."""
        storage.save_file("gone.py", "x")
        storage.delete_file("gone.py")

        assert storage.list_files() == []
        with pytest.raises(FileNotFoundError):
            storage.read_file("gone.py")

    def test_missing_files(self, storage) -> None:
        """Test reading and deleting files that don't exist."""
        with pytest.raises(FileNotFoundError):
            storage.read_file("nope.py")
        with pytest.raises(FileNotFoundError):
            storage.delete_file("nope.py")

    def test_names_cannot_escape_directory(self, storage, tmp_path) -> None:
        """Test that path components are stripped from names."""
        stored = storage.save_file("../../evil.py", "x")

        assert stored.name == "evil.py"
        assert (storage.files_dir / "evil.py").exists()
        assert not (tmp_path.parent / "evil.py").exists()

    def test_invalid_name(self, storage) -> None:
        """Test names that sanitise to nothing."""
        with pytest.raises(ValueError):
            storage.save_file("..", "x")

    def test_clear(self, storage) -> None:
        """Test removing every file."""
        storage.save_file("a.py", "1")
        storage.save_file("b.py", "2")

        assert storage.clear() == 2
        assert storage.list_files() == []
