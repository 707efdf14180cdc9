"""Coarse file categories keyed by extension."""

from __future__ import annotations

import posixpath
from urllib.parse import unquote, urlsplit

APP_CATEGORIES: dict[str, frozenset[str]] = {
    "audio": frozenset({"aif", "au", "mid", "midi", "mp3", "ra", "ram", "rm", "wav"}),
    "mov": frozenset(
        {"mpeg", "mpg", "mp4", "m1v", "mp2", "mpa", "mpe", "ifo", "vob", "avi", "wmv", "asf", "m2v", "qt"},
    ),
    "zip": frozenset({"arc", "rar", "tar", "gz", "tgz", "bz2", "dmg", "jar", "ace", "arj", "bz", "cab"}),
    "image": frozenset({"bmp", "gif", "jpg", "jpeg", "pcx", "tif", "png", "alpha", "als", "cel", "icon", "ico", "ps"}),
    "flash": frozenset({"swf", "fla"}),
    "doc": frozenset(
        {"doc", "docx", "txt", "rtf", "xls", "xlsx", "pages", "ppt", "pptx", "pps", "csv", "html", "htm", "xhtml", "xml", "pdf"},
    ),
}

_EXTENSION_CATEGORIES = {ext: category for category, exts in APP_CATEGORIES.items() for ext in exts}


def get_file_extension(url: str) -> str:
    """Return the lowercase extension of the last path segment, without the dot.

    Unparseable URLs have no extension.
    """

    try:
        path = unquote(urlsplit(url).path)
    except ValueError:
        return ""
    return posixpath.splitext(posixpath.basename(path))[1].lstrip(".").lower()


def get_app_category(extension: str) -> str | None:
    return _EXTENSION_CATEGORIES.get(extension.lower())


def is_image_url(url: str) -> bool:
    return get_app_category(get_file_extension(url)) == "image"
