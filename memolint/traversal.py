"""
File system traversal: walk directories and collect Ruby source files.

Typical usage:
    from pathlib import Path
    from memolint.traversal import find_ruby_files, find_source_files

    rb_files = find_ruby_files(Path("./app"))

    # Custom ignore set and filter
    sources = find_source_files(
        Path("./app"),
        ignore_dirs={"vendor", "tmp"},
        filter_fn=lambda p: p.name != "schema.rb",
    )
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

RUBY_SUFFIXES: Set[str] = {".rb", ".rake", ".gemspec", ".ru"}

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Build output and generated files
    "build",
    "dist",
    "pkg",
    "tmp",
    "log",
    "coverage",
    "public",

    # Dependencies
    "vendor",
    "node_modules",
    ".bundle",

    # Version control
    ".git",
    ".svn",
    ".hg",

    # IDE and editor directories
    ".vscode",
    ".idea",

    # Cache directories
    ".cache",
    "__pycache__",
    ".pytest_cache",
}


def is_ruby_file(path: Path) -> bool:
    """
    Check if a file is a Ruby source file.

    Examples:
        >>> is_ruby_file(Path("app/models/user.rb"))
        True
        >>> is_ruby_file(Path("lib/tasks/db.rake"))
        True
        >>> is_ruby_file(Path("README.md"))
        False
    """
    return path.suffix.lower() in RUBY_SUFFIXES


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """Return True if the directory name is in ignore_dirs (case-sensitive)."""
    return dir_path.name in ignore_dirs


def find_source_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find all Ruby source files in a directory tree.

    Args:
        root: Root directory to start traversal from.
        ignore_dirs: Set of directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links during traversal.
                         If False (default), symlinks are skipped.
        filter_fn: Optional additional filter; only files for which
                   filter_fn(path) returns True are included.

    Returns:
        Sorted list of matching files.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        NotADirectoryError: If root is not a directory.

    Permission errors on subdirectories are logged and do not stop traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)
    logger.debug(
        "Traversal config: follow_symlinks=%s, ignore_dirs=%s",
        follow_symlinks,
        ignore_dirs,
    )

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file() and is_ruby_file(entry):
                    if filter_fn is not None and not filter_fn(entry):
                        logger.debug("Filtered out by custom filter: %s", entry)
                        continue
                    logger.debug("Found source file: %s", entry)
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)

    collected_files.sort()

    logger.info(
        "Traversal complete: found %d source file(s) in %s",
        len(collected_files),
        root,
    )

    return collected_files


def find_ruby_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
) -> list[Path]:
    """Find Ruby files under root with the default filters; sorted by path."""
    return find_source_files(
        root=root,
        ignore_dirs=ignore_dirs,
        follow_symlinks=follow_symlinks,
    )
