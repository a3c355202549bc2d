"""
End-to-end tests of the command line entry point over a local file: site.
"""

import json
import logging

import pytest

from webcrawler.config import LOG_LEVEL_ENV
from webcrawler.main import main


@pytest.fixture(autouse=True)
def restore_root_logging(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def site(html_site):
    return html_site({
        "index": '<p>apple apple</p><a href="a.html">banana</a>',
        "a": '<p>the cherry</p><a href="b.html">apple</a>',
        "b": '<p>banana</p><a href="index.html">cherry</a>',
    })


def write_config(tmp_path, **values):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(values), encoding="utf-8")
    return str(path)


class TestMainIntegration:

    def test_crawl_writes_result_and_profile_files(self, tmp_path, site):
        result_path = tmp_path / "result.json"
        profile_path = tmp_path / "profile.txt"
        config_path = write_config(
            tmp_path,
            startPages=[site["index"]],
            ignoredWords=["the"],
            parallelism=2,
            maxDepth=10,
            timeoutSeconds=30,
            popularWordCount=3,
            resultPath=str(result_path),
            profileOutputPath=str(profile_path),
            logLevel="WARNING",
        )

        assert main([config_path]) == 0

        result = json.loads(result_path.read_text(encoding="utf-8"))
        assert list(result["wordCounts"].items()) == [("apple", 3), ("banana", 2), ("cherry", 2)]
        assert result["urlsVisited"] == 3

        profile = profile_path.read_text(encoding="utf-8")
        assert profile.startswith("Run at ")
        assert "ParallelWebCrawler#crawl took" in profile
        assert "HtmlPageParser#parse took" in profile

    def test_results_go_to_stdout_without_paths(self, tmp_path, site, capsys):
        config_path = write_config(
            tmp_path,
            startPages=[site["index"]],
            ignoredUrls=[r".*/b\.html"],
            maxDepth=10,
            timeoutSeconds=30,
            popularWordCount=10,
            logLevel="ERROR",
        )

        assert main([config_path]) == 0

        out = capsys.readouterr().out
        result = json.loads(out.splitlines()[0])
        assert result == {"wordCounts": {"apple": 3, "banana": 1, "cherry": 1, "the": 1}, "urlsVisited": 2}
        assert "Run at " in out

    def test_invalid_config_exits_with_error(self, tmp_path, capsys):
        config_path = write_config(tmp_path, maxDepth=-1)

        assert main([config_path]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_config_exits_with_error(self, tmp_path):
        assert main([str(tmp_path / "missing.json")]) == 1

    def test_unwritable_result_exits_with_error(self, tmp_path, site):
        config_path = write_config(
            tmp_path,
            startPages=[site["index"]],
            maxDepth=1,
            timeoutSeconds=30,
            resultPath=str(tmp_path / "missing" / "result.json"),
            logLevel="CRITICAL",
        )

        assert main([config_path]) == 1

    def test_missing_argument_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2
