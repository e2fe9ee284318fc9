"""Tests for binary classification and file type labels."""

from __future__ import annotations

import pytest

from project_tree.core.binary import (
    SNIFF_LENGTH,
    classify,
    describe_file_type,
    get_extension,
    is_binary_extension,
    is_content_binary,
)


class TestGetExtension:
    def test_lowercases(self) -> None:
        assert get_extension("Photo.JPG") == "jpg"

    def test_last_suffix_only(self) -> None:
        assert get_extension("archive.tar.gz") == "gz"

    def test_no_extension(self) -> None:
        assert get_extension("Makefile") is None

    def test_dotfile_has_no_extension(self) -> None:
        assert get_extension(".gitignore") is None

    def test_nested_path(self) -> None:
        assert get_extension("docs/readme.md") == "md"


class TestClassify:
    def test_binary_extension_without_sample(self) -> None:
        assert classify("photo.PNG") == (True, "PNG Image")

    def test_binary_extension_wins_over_text_sample(self) -> None:
        assert classify("notes.pdf", b"plain text").is_binary is True

    def test_text_with_null_byte(self) -> None:
        assert classify("data.txt", b"abc\x00def") == (True, "Text File")

    def test_plain_markdown(self) -> None:
        assert classify("readme.md", b"# Title\n") == (False, "Markdown File")

    def test_invalid_utf8(self) -> None:
        assert classify("notes.txt", b"\xff\xfe\xfa").is_binary is True

    def test_unknown_extension_without_sample(self) -> None:
        assert classify("config.toml") == (False, "TOML File")

    def test_no_extension(self) -> None:
        assert classify("LICENSE") == (False, "Unknown File")

    def test_null_byte_past_sniff_window_is_ignored(self) -> None:
        sample = b"a" * SNIFF_LENGTH + b"\x00"
        assert is_content_binary(sample) is False

    def test_null_byte_at_window_end(self) -> None:
        sample = b"a" * (SNIFF_LENGTH - 1) + b"\x00"
        assert is_content_binary(sample) is True


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.exe", True),
        ("a.sqlite3", True),
        ("a.svg", True),
        ("a.py", False),
        ("a.csv", False),
        ("noext", False),
    ],
)
def test_is_binary_extension(name: str, expected: bool) -> None:
    assert is_binary_extension(name) is expected


@pytest.mark.parametrize(
    ("name", "label"),
    [
        ("main.py", "Python Script"),
        ("book.xlsx", "Excel Spreadsheet"),
        ("clip.mp4", "MP4 Video"),
        ("image.heic", "HEIC File"),
    ],
)
def test_describe_file_type(name: str, label: str) -> None:
    assert describe_file_type(name) == label
