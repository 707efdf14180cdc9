from __future__ import annotations

import allure

from oembed_resolver.oembed.result import HOTLINK_INFO, OembedResult, find_thumbnail

pytestmark = [
    allure.epic("oEmbed Resolution"),
    allure.feature("Resource Descriptors"),
]

OEMBED_URL = "http://provider.example/oembed?format=json&url=http%3A%2F%2Fsite.example%2Fv%2F1"
ORIGIN = "http://site.example/v/1"


def _result(fetcher, expected_type=None, options=None) -> OembedResult:
    return OembedResult(OEMBED_URL, ORIGIN, expected_type, options, fetcher=fetcher)


def test_fetch_happens_once_and_is_lazy(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "video", "title": "Clip"})
    result = _result(fetcher)

    assert fetcher.calls == []
    assert result.get_field("title") == "Clip"
    assert result.get_field("Title") == "Clip"
    assert result.exists()
    assert fetcher.calls == [OEMBED_URL]


def test_prefetched_response_replaces_the_fetch(fetcher, png_bytes) -> None:
    image_url = "http://images.example/cat.png"
    prefetched = fetcher.fetch(image_url)
    fetcher.add(image_url, png_bytes)
    fetcher.calls.clear()
    result = OembedResult(image_url, image_url, fetcher=fetcher, prefetched=prefetched)

    assert not result.exists()
    assert result.render() == ""
    assert fetcher.calls == []


def test_field_names_are_lowercased(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"Type": "rich", "HTML": "<b>x</b>", "Provider_URL": "http://provider.example"})
    result = _result(fetcher)

    assert result.has_field("html")
    assert result.has_field("Provider_URL")
    assert result.get_field("provider_url") == "http://provider.example"
    assert result.get_field("missing") is None
    assert set(result.fields) == {"type", "html", "provider_url"}


def test_error_status_means_no_resource(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "video"}, status=404)
    result = _result(fetcher)

    assert not result.exists()
    assert result.render() == ""
    result.exists()
    assert fetcher.calls == [OEMBED_URL]


def test_non_json_non_image_payload_is_empty(fetcher) -> None:
    fetcher.add(OEMBED_URL, b"<html>not an embed</html>")

    assert not _result(fetcher).exists()


def test_json_array_payload_is_empty(fetcher) -> None:
    fetcher.add(OEMBED_URL, "[1, 2, 3]")

    assert not _result(fetcher).exists()


def test_type_mismatch_discards_data(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "photo", "url": "http://x/a.jpg"})
    result = _result(fetcher, expected_type="video")

    assert not result.exists()
    assert result.get_field("type") is None


def test_matching_type_keeps_data(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "video", "html": "<iframe></iframe>"})

    assert _result(fetcher, expected_type="video").exists()


def test_image_payload_becomes_photo(fetcher, png_bytes) -> None:
    image_url = "http://images.example/pics/cat.png"
    fetcher.add(image_url, png_bytes)
    result = OembedResult(image_url, image_url, fetcher=fetcher)

    assert result.fields == {
        "type": "photo",
        "title": "cat.png (images.example)",
        "url": image_url,
        "provider_url": "http://images.example",
        "width": 64,
        "height": 48,
        "info": HOTLINK_INFO,
    }
    assert result.render() == (
        "<img src='http://images.example/pics/cat.png' width='64' height='48' class='' />"
    )


def test_render_video_wraps_html(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "video", "html": "<iframe src='x'></iframe>"})

    assert _result(fetcher).render() == "<div class='media'><iframe src='x'></iframe></div>"
    assert (
        _result(fetcher, options={"class": "wide"}).render()
        == "<div class='media wide'><iframe src='x'></iframe></div>"
    )


def test_render_link_points_to_origin(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "link", "title": "Tom & Jerry"})

    assert _result(fetcher, options={"class": "ext"}).render() == (
        '<a class="ext" href="http://site.example/v/1">Tom &amp; Jerry</a>'
    )


def test_render_photo_uses_fetched_dimensions(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "photo", "url": "http://x/a.jpg", "width": 300, "height": 200})

    assert _result(fetcher, options={"class": "pic", "width": 100}).render() == (
        "<img src='http://x/a.jpg' width='300' height='200' class='pic' />"
    )


def test_render_photo_falls_back_to_requested_dimensions(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "photo", "url": "http://x/a.jpg"})

    assert _result(fetcher, options={"width": 100, "height": 80}).render() == (
        "<img src='http://x/a.jpg' width='100' height='80' class='' />"
    )


def test_unknown_type_renders_nothing(fetcher) -> None:
    fetcher.add(OEMBED_URL, {"type": "audio", "title": "Song"})
    result = _result(fetcher)

    assert result.exists()
    assert result.render() == ""


def test_facebook_thumbnail_is_inferred(fetcher) -> None:
    fetcher.add(
        OEMBED_URL,
        {"type": "rich", "provider_name": "Facebook", "url": "https://www.facebook.com/photo/12345"},
    )

    thumbnail = _result(fetcher).get_field("thumbnail_url")

    assert thumbnail == "https://graph.facebook.com/12345/picture"


def test_find_thumbnail_rules() -> None:
    assert find_thumbnail({"thumbnail_url": "http://x/t.jpg", "provider_name": "Facebook"}) == "http://x/t.jpg"
    assert find_thumbnail({"provider_name": "Facebook", "url": "https://facebook.com/p/678/?ref=1"}) == (
        "https://graph.facebook.com/678/picture"
    )
    assert find_thumbnail({"provider_name": "Facebook", "url": "https://facebook.com/page"}) is None
    assert find_thumbnail({"provider_name": "Vimeo", "url": "https://vimeo.com/1"}) is None


def test_repr_and_identity(fetcher) -> None:
    result = _result(fetcher, expected_type="video", options={"class": "x"})

    assert result.oembed_url == OEMBED_URL
    assert result.origin == ORIGIN
    assert result.expected_type == "video"
    assert result.extra_class == "x"
    assert "OembedResult(" in repr(result)
    assert fetcher.calls == []
