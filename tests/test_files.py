from __future__ import annotations

import allure
import pytest

from oembed_resolver.files import get_app_category, get_file_extension, is_image_url

pytestmark = [
    allure.epic("oEmbed Resolution"),
    allure.feature("File Categories"),
]


@pytest.mark.parametrize(
    ("url", "extension"),
    [
        ("http://x.example/a/photo.PNG", "png"),
        ("http://x.example/photo.jpeg?w=100#top", "jpeg"),
        ("http://x.example/my%20file.gif", "gif"),
        ("http://x.example/archive.tar.gz", "gz"),
        ("http://x.example/folder/", ""),
        ("http://x.example", ""),
    ],
)
def test_get_file_extension(url: str, extension: str) -> None:
    assert get_file_extension(url) == extension


def test_get_app_category() -> None:
    assert get_app_category("JPG") == "image"
    assert get_app_category("mp3") == "audio"
    assert get_app_category("pdf") == "doc"
    assert get_app_category("") is None
    assert get_app_category("exe") is None


def test_is_image_url() -> None:
    assert is_image_url("http://x.example/cat.png")
    assert not is_image_url("http://x.example/cat.html")
    assert not is_image_url("http://x.example/watch?v=cat.png")
    assert not is_image_url("http://[oops/pic.png")
