# tests/test_urls.py

"""Tests for resolving scraped links against the page URL."""

import unittest

from storescrape.scraping.urls import resolve_url

BASE = "https://shop.example/cat"


class TestResolveUrl(unittest.TestCase):
    """resolve_url applies its four rules in order."""

    def test_absolute_unchanged(self) -> None:
        """http(s) URLs are returned as-is."""
        for candidate in [
            "https://other.example/a.png",
            "http://other.example/a.png",
        ]:
            with self.subTest(candidate=candidate):
                self.assertEqual(resolve_url(BASE, candidate), candidate)

    def test_absolute_idempotent(self) -> None:
        """Resolving an already-resolved URL changes nothing."""
        once = resolve_url(BASE, "/img/a.png")
        self.assertEqual(resolve_url(BASE, once), once)

    def test_protocol_relative_gets_https(self) -> None:
        """//host/path is prefixed with https: regardless of base scheme."""
        self.assertEqual(
            resolve_url("http://shop.example", "//cdn.example/a.png"),
            "https://cdn.example/a.png",
        )

    def test_root_relative_uses_scheme_and_host(self) -> None:
        """/path replaces the base path entirely."""
        self.assertEqual(
            resolve_url(BASE, "/img/a.png"),
            "https://shop.example/img/a.png",
        )

    def test_root_relative_drops_base_query(self) -> None:
        """Query strings on the base do not leak into the result."""
        self.assertEqual(
            resolve_url("https://shop.example/search?q=x", "/p/1"),
            "https://shop.example/p/1",
        )

    def test_root_relative_unparseable_base(self) -> None:
        """Without a scheme and host in the base, the path is kept as-is."""
        self.assertEqual(resolve_url("not a url", "/p/1"), "/p/1")
        self.assertEqual(resolve_url("", "/p/1"), "/p/1")

    def test_relative_path_joined(self) -> None:
        """Plain relative paths are appended to the base with one slash."""
        self.assertEqual(
            resolve_url(BASE, "item.html"),
            "https://shop.example/cat/item.html",
        )
        self.assertEqual(
            resolve_url(BASE + "//", "item.html"),
            "https://shop.example/cat/item.html",
        )

    def test_relative_dot_segments_not_normalised(self) -> None:
        """'..' is passed through untouched."""
        self.assertEqual(
            resolve_url(BASE, "../up.html"),
            "https://shop.example/cat/../up.html",
        )


if __name__ == "__main__":
    unittest.main()
