"""Tests for file system traversal functionality."""

import logging
from pathlib import Path

import pytest

from memolint.traversal import (
    DEFAULT_IGNORE_DIRS,
    find_ruby_files,
    find_source_files,
    is_ruby_file,
    should_ignore_directory,
)


class TestFileTypeChecks:
    """Test file type checking."""

    def test_is_ruby_file_recognizes_ruby_extensions(self):
        """is_ruby_file() accepts .rb, .rake, .gemspec and .ru files."""
        assert is_ruby_file(Path("app/models/user.rb"))
        assert is_ruby_file(Path("lib/tasks/db.rake"))
        assert is_ruby_file(Path("memolint.gemspec"))
        assert is_ruby_file(Path("config.ru"))

    def test_is_ruby_file_case_insensitive(self):
        assert is_ruby_file(Path("LEGACY.RB"))

    def test_is_ruby_file_rejects_other_files(self):
        assert not is_ruby_file(Path("app.py"))
        assert not is_ruby_file(Path("view.erb"))
        assert not is_ruby_file(Path("README.md"))
        assert not is_ruby_file(Path("Gemfile"))


class TestDirectoryFiltering:
    """Test directory ignore logic."""

    def test_should_ignore_directory_recognizes_ignored_dirs(self):
        ignore_set = {"vendor", "tmp"}
        assert should_ignore_directory(Path("vendor"), ignore_set)
        assert should_ignore_directory(Path("tmp"), ignore_set)

    def test_should_ignore_directory_allows_non_ignored_dirs(self):
        ignore_set = {"vendor", "tmp"}
        assert not should_ignore_directory(Path("app"), ignore_set)
        assert not should_ignore_directory(Path("lib"), ignore_set)

    def test_should_ignore_directory_case_sensitive(self):
        assert not should_ignore_directory(Path("Vendor"), {"vendor"})

    def test_default_ignore_dirs_includes_common_patterns(self):
        assert "vendor" in DEFAULT_IGNORE_DIRS
        assert "node_modules" in DEFAULT_IGNORE_DIRS
        assert ".git" in DEFAULT_IGNORE_DIRS
        assert "tmp" in DEFAULT_IGNORE_DIRS


class TestTraversal:
    """Test file traversal functions."""

    @pytest.fixture
    def temp_project(self, tmp_path):
        """
        tmp_path/
          app/models/user.rb
          app/models/post.rb
          lib/tasks/cleanup.rake
          vendor/bundle/gem.rb   (ignored)
          tmp/cache.rb           (ignored)
          README.md
        """
        (tmp_path / "app" / "models").mkdir(parents=True)
        (tmp_path / "lib" / "tasks").mkdir(parents=True)
        (tmp_path / "vendor" / "bundle").mkdir(parents=True)
        (tmp_path / "tmp").mkdir()

        (tmp_path / "app" / "models" / "user.rb").write_text("class User; end\n")
        (tmp_path / "app" / "models" / "post.rb").write_text("class Post; end\n")
        (tmp_path / "lib" / "tasks" / "cleanup.rake").write_text("task :cleanup\n")
        (tmp_path / "vendor" / "bundle" / "gem.rb").write_text("# vendored\n")
        (tmp_path / "tmp" / "cache.rb").write_text("# cache\n")
        (tmp_path / "README.md").write_text("# Project")

        return tmp_path

    def test_find_ruby_files_skips_ignored_dirs(self, temp_project):
        files = find_ruby_files(temp_project)
        names = {f.name for f in files}
        assert names == {"user.rb", "post.rb", "cleanup.rake"}
        assert all("vendor" not in f.parts for f in files)

    def test_find_source_files_custom_ignore_dirs(self, temp_project):
        files = find_source_files(temp_project, ignore_dirs={"tmp"})
        names = {f.name for f in files}
        assert "gem.rb" in names
        assert "cache.rb" not in names
        assert len(files) == 4

    def test_find_source_files_with_filter_function(self, temp_project):
        files = find_source_files(temp_project, filter_fn=lambda p: p.suffix == ".rake")
        assert [f.name for f in files] == ["cleanup.rake"]

    def test_find_source_files_empty_directory(self, tmp_path):
        (tmp_path / "empty").mkdir()
        (tmp_path / "empty" / "README.txt").write_text("No Ruby here")
        assert find_source_files(tmp_path / "empty") == []

    def test_find_source_files_nonexistent_directory(self):
        with pytest.raises(FileNotFoundError):
            find_source_files(Path("/nonexistent/directory"))

    def test_find_source_files_on_file_not_directory(self, tmp_path):
        file_path = tmp_path / "one.rb"
        file_path.write_text("def one; end\n")
        with pytest.raises(NotADirectoryError):
            find_source_files(file_path)

    def test_find_source_files_returns_sorted_results(self, temp_project):
        files = find_ruby_files(temp_project)
        assert files == sorted(files)

    def test_find_source_files_logs_progress(self, temp_project, caplog):
        with caplog.at_level(logging.INFO):
            find_ruby_files(temp_project)
        assert "Starting traversal" in caplog.text
        assert "Traversal complete" in caplog.text


class TestEdgeCases:
    def test_nested_directories(self, tmp_path):
        nested = tmp_path / "a" / "b" / "c"
        nested.mkdir(parents=True)
        (nested / "deep.rb").write_text("def deep; end\n")
        files = find_ruby_files(tmp_path)
        assert [f.name for f in files] == ["deep.rb"]

    def test_empty_ignore_dirs_set(self, tmp_path):
        (tmp_path / "vendor").mkdir()
        (tmp_path / "vendor" / "gem.rb").write_text("# vendored\n")
        files = find_source_files(tmp_path, ignore_dirs=set())
        assert [f.name for f in files] == ["gem.rb"]

    def test_symlinks_skipped_by_default(self, tmp_path):
        (tmp_path / "real").mkdir()
        (tmp_path / "real" / "a.rb").write_text("def a; end\n")
        try:
            (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
        except OSError:
            pytest.skip("symlinks not supported")
        assert [f.name for f in find_ruby_files(tmp_path)] == ["a.rb"]
        assert len(find_source_files(tmp_path, follow_symlinks=True)) == 2
