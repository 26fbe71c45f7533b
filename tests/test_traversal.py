"""Tests for file system traversal functionality."""

import logging
from pathlib import Path

import pytest

from permlint.traversal import (
    DEFAULT_IGNORE_DIRS,
    find_java_files,
    find_source_files,
    is_java_file,
    should_ignore_directory,
)


class TestFileTypeChecks:
    """Test file type checking functions."""

    def test_is_java_file_recognizes_java_extension(self):
        assert is_java_file(Path("MainActivity.java"))
        assert is_java_file(Path("app/src/main/java/Foo.java"))

    def test_is_java_file_case_insensitive(self):
        assert is_java_file(Path("Foo.JAVA"))

    def test_is_java_file_rejects_other_files(self):
        assert not is_java_file(Path("Foo.kt"))
        assert not is_java_file(Path("Foo.class"))
        assert not is_java_file(Path("build.gradle"))
        assert not is_java_file(Path("README.md"))


class TestDirectoryFiltering:
    """Test directory ignore logic."""

    def test_should_ignore_directory_recognizes_ignored_dirs(self):
        ignore_set = {"build", "generated"}
        assert should_ignore_directory(Path("build"), ignore_set)
        assert should_ignore_directory(Path("app/generated"), ignore_set)

    def test_should_ignore_directory_allows_non_ignored_dirs(self):
        assert not should_ignore_directory(Path("src"), {"build"})

    def test_should_ignore_directory_case_sensitive(self):
        assert not should_ignore_directory(Path("BUILD"), {"build"})

    def test_default_ignore_dirs_includes_common_patterns(self):
        assert "build" in DEFAULT_IGNORE_DIRS
        assert "target" in DEFAULT_IGNORE_DIRS
        assert ".gradle" in DEFAULT_IGNORE_DIRS
        assert ".git" in DEFAULT_IGNORE_DIRS


class TestTraversal:
    """Test file traversal functions."""

    @pytest.fixture
    def temp_project(self, tmp_path):
        """
        tmp_path/
          app/src/main/java/MainActivity.java
          app/src/main/java/Helper.java
          app/src/main/res/layout.xml
          app/build/generated/MainActivityPermissionsDispatcher.java (ignored)
          .gradle/Cache.java (ignored)
        """
        java_dir = tmp_path / "app" / "src" / "main" / "java"
        java_dir.mkdir(parents=True)
        (tmp_path / "app" / "src" / "main" / "res").mkdir()
        generated = tmp_path / "app" / "build" / "generated"
        generated.mkdir(parents=True)
        (tmp_path / ".gradle").mkdir()

        (java_dir / "MainActivity.java").write_text("class MainActivity { }")
        (java_dir / "Helper.java").write_text("class Helper { }")
        (tmp_path / "app" / "src" / "main" / "res" / "layout.xml").write_text("<LinearLayout/>")
        (generated / "MainActivityPermissionsDispatcher.java").write_text("final class X { }")
        (tmp_path / ".gradle" / "Cache.java").write_text("class Cache { }")
        return tmp_path

    def test_find_java_files_skips_ignored_directories(self, temp_project):
        files = find_java_files(temp_project)
        assert {f.name for f in files} == {"MainActivity.java", "Helper.java"}
        assert all("build" not in f.parts for f in files)

    def test_find_source_files_custom_ignore_dirs(self, temp_project):
        files = find_source_files(temp_project, ignore_dirs={".gradle"})
        names = {f.name for f in files}
        assert "MainActivityPermissionsDispatcher.java" in names
        assert "Cache.java" not in names
        assert len(files) == 3

    def test_find_source_files_with_filter_function(self, temp_project):
        files = find_source_files(temp_project, filter_fn=lambda p: "Main" in p.name)
        assert [f.name for f in files] == ["MainActivity.java"]

    def test_find_source_files_empty_directory(self, tmp_path):
        (tmp_path / "empty").mkdir()
        (tmp_path / "empty" / "README.txt").write_text("nothing here")
        assert find_source_files(tmp_path / "empty") == []

    def test_find_source_files_nonexistent_directory(self):
        with pytest.raises(FileNotFoundError):
            find_source_files(Path("/nonexistent/directory"))

    def test_find_source_files_on_file_not_directory(self, tmp_path):
        file_path = tmp_path / "Foo.java"
        file_path.write_text("class Foo { }")
        with pytest.raises(NotADirectoryError):
            find_source_files(file_path)

    def test_find_java_files_returns_sorted_results(self, temp_project):
        files = find_java_files(temp_project)
        assert files == sorted(files)

    def test_find_java_files_logs_progress(self, temp_project, caplog):
        with caplog.at_level(logging.INFO):
            find_java_files(temp_project)
        assert "Starting traversal" in caplog.text
        assert "Traversal complete" in caplog.text

    def test_nested_directories(self, tmp_path):
        nested = tmp_path / "a" / "b" / "c" / "d"
        nested.mkdir(parents=True)
        (nested / "Deep.java").write_text("class Deep { }")
        files = find_java_files(tmp_path)
        assert [f.name for f in files] == ["Deep.java"]
