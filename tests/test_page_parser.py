"""
Tests for HTML page parsing over file: URLs.
"""

from unittest.mock import Mock

import pytest
from bs4 import BeautifulSoup

from webcrawler.parser.http_client import HTTPClient
from webcrawler.parser.page_parser import HtmlPageParser, count_words, extract_links
from webcrawler.utils.errors import CrawlerError
from webcrawler.utils.patterns import compile_patterns


class TestCountWords:

    def test_strips_punctuation_and_lowercases(self):
        assert count_words("Hello, hello! WORLD.") == {"hello": 2, "world": 1}

    def test_drops_tokens_without_word_characters(self):
        assert count_words("  -- ... ?? word ") == {"word": 1}

    def test_ignored_words_must_match_whole_word(self):
        ignored = compile_patterns(["the", "^.{1,2}$"])

        counts = count_words("the theory of it and an apple", ignored)

        assert counts == {"theory": 1, "and": 1, "apple": 1}

    def test_empty_text(self):
        assert count_words("") == {}


class TestExtractLinks:

    def test_resolves_relative_links_and_drops_fragments(self):
        soup = BeautifulSoup(
            '<a href="b.html#top">b</a>'
            '<a href="/c">c</a>'
            '<a href="https://other.example/d">d</a>'
            '<a href="b.html">again</a>',
            "html.parser"
        )

        links = extract_links(soup, "http://example.com/dir/a.html")

        assert links == [
            "http://example.com/dir/b.html",
            "http://example.com/c",
            "https://other.example/d",
        ]

    def test_skips_non_navigable_links(self):
        soup = BeautifulSoup(
            '<a href="javascript:void(0)">js</a>'
            '<a href="mailto:someone@example.com">mail</a>'
            '<a href="ftp://example.com/file">ftp</a>'
            '<a href="">empty</a>'
            '<a>no href</a>',
            "html.parser"
        )

        assert extract_links(soup, "http://example.com/") == []


class TestHtmlPageParser:

    def test_parses_local_page(self, html_site):
        urls = html_site({
            "index": '<h1>Welcome Home</h1><p>welcome to the site</p>'
                     '<a href="about.html">About</a><a href="#section">skip</a>',
            "about": "<p>about us</p>",
        })
        parser = HtmlPageParser(http_client=Mock(spec=HTTPClient))

        page = parser.parse(urls["index"])

        assert page.links == [urls["about"], urls["index"]]
        assert page.word_counts == {
            "welcome": 2, "home": 1, "to": 1, "the": 1, "site": 1, "about": 1, "skip": 1
        }

    def test_script_and_style_are_not_counted(self, html_site):
        urls = html_site({
            "page": "<script>var hidden = 1;</script><style>.x { color: red }</style><p>visible</p>",
        })
        parser = HtmlPageParser(http_client=Mock(spec=HTTPClient))

        assert parser.parse(urls["page"]).word_counts == {"visible": 1}

    def test_ignored_words(self, html_site):
        urls = html_site({"page": "<p>the cat and the hat</p>"})
        parser = HtmlPageParser(http_client=Mock(spec=HTTPClient), ignored_words=["the", "and"])

        assert parser.parse(urls["page"]).word_counts == {"cat": 1, "hat": 1}

    def test_http_urls_use_client(self):
        client = Mock(spec=HTTPClient)
        client.get.return_value = Mock(text='<p>remote words</p><a href="/next">n</a>')
        parser = HtmlPageParser(http_client=client)

        page = parser.parse("http://example.com/start")

        client.get.assert_called_once_with("http://example.com/start")
        assert page.links == ["http://example.com/next"]
        assert page.word_counts == {"remote": 1, "words": 1, "n": 1}

    def test_missing_file_raises(self, tmp_path):
        parser = HtmlPageParser(http_client=Mock(spec=HTTPClient))

        with pytest.raises(CrawlerError):
            parser.parse((tmp_path / "missing.html").as_uri())

    def test_unsupported_scheme_raises(self):
        parser = HtmlPageParser(http_client=Mock(spec=HTTPClient))

        with pytest.raises(CrawlerError, match="Unsupported URL scheme"):
            parser.parse("ftp://example.com/file")

    def test_close_closes_client(self):
        client = Mock(spec=HTTPClient)

        HtmlPageParser(http_client=client).close()

        client.close.assert_called_once_with()
