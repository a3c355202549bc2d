"""
Pytest configuration and fixtures for web crawler tests.
"""

import logging
import os

import pytest
from hypothesis import settings, Verbosity

# Configure Hypothesis for faster test runs
settings.register_profile("fast", max_examples=20, deadline=None, verbosity=Verbosity.quiet)
settings.register_profile("thorough", max_examples=200, deadline=None, verbosity=Verbosity.normal)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture
def html_site(tmp_path):
    """Write a small linked HTML site to disk and return a page-name -> file URL mapping."""
    def build(pages):
        urls = {}
        for name, body in pages.items():
            path = tmp_path / f"{name}.html"
            path.write_text(f"<html><body>{body}</body></html>", encoding="utf-8")
            urls[name] = path.as_uri()
        return urls
    return build


def pytest_configure(config):
    """Configure pytest with custom settings."""
    logging.getLogger("webcrawler").setLevel(logging.WARNING)
    logging.getLogger("hypothesis").setLevel(logging.WARNING)


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Mark property-based tests
        if "properties" in item.fspath.basename or hasattr(item.obj, "hypothesis"):
            item.add_marker(pytest.mark.property)
        
        if "integration" in item.name.lower() or "integration" in item.fspath.basename:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
