"""Name-based content type classification."""
import pytest

from s3browser.services.mime import DEFAULT_MIME_TYPE, file_extension, guess_mime_type


@pytest.mark.parametrize(
    "name, expected",
    [
        ("report.pdf", "application/pdf"),
        ("readme.txt", "text/plain"),
        ("archive.tar.gz", "application/gzip"),
        ("photo.JPG", "image/jpeg"),
        ("dir/sub/clip.mkv", "video/x-matroska"),
        ("notes.md", "text/markdown"),
        ("config.yml", "application/x-yaml"),
        ("main.go", "text/x-go"),
        ("sheet.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    ],
)
def test_known_extensions(name, expected):
    assert guess_mime_type(name) == expected


@pytest.mark.parametrize("name", ["README", "", "dir.with.dots/Makefile", "trailing."])
def test_missing_extension_falls_back_to_binary(name):
    assert guess_mime_type(name) == DEFAULT_MIME_TYPE


def test_unknown_extension_falls_back_to_binary():
    assert guess_mime_type("blob.zz-not-a-real-ext") == DEFAULT_MIME_TYPE


def test_only_last_extension_counts():
    assert file_extension("backup.2024.tar.gz") == ".gz"
    assert file_extension("a/b.c/file") == ""
