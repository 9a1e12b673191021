"""Pytest configuration and shared fixtures for the a11y-scan test suite."""

import copy

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that require external services (Playwright, dev server)"
    )


# ---------------------------------------------------------------------------
# Sample axe-core results
# ---------------------------------------------------------------------------

COLOR_CONTRAST = {
    "id": "color-contrast",
    "description": "Insufficient contrast",
    "impact": "serious",
    "help": "Fix contrast",
    "helpUrl": "https://example.com",
    "tags": ["wcag2aa"],
    "nodes": [
        {"target": ["button.cta"], "failureSummary": "Contrast ratio 2.1:1"},
    ],
}


@pytest.fixture
def contrast_results():
    """Single serious color-contrast violation with one affected node."""
    return {"violations": [copy.deepcopy(COLOR_CONTRAST)]}


@pytest.fixture
def mixed_results():
    """Several violations covering missing impact, empty nodes and missing summaries."""
    return {
        "violations": [
            {
                "id": "image-alt",
                "description": "Ensures <img> elements have alternate text",
                "impact": "critical",
                "help": "Images must have alternate text",
                "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/image-alt",
                "tags": ["cat.text-alternatives", "wcag2a", "wcag111"],
                "nodes": [
                    {
                        "target": ["img.hero"],
                        "failureSummary": "Fix any of the following:\n  Element does not have an alt attribute",
                    },
                    {"target": ["#logo > img"], "failureSummary": None},
                ],
            },
            {
                "id": "region",
                "description": "Ensures all page content is contained by landmarks",
                "help": "All page content should be contained by landmarks",
                "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/region",
                "tags": ["cat.keyboard", "best-practice"],
                "nodes": [],
            },
            {
                "id": "link-name",
                "description": "Ensures links have discernible text",
                "impact": "minor",
                "help": "Links must have discernible text",
                "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/link-name",
                "tags": ["wcag2a", "wcag244"],
                "nodes": [{"target": ["nav a:nth-child(2)", "footer a"]}],
            },
        ]
    }


@pytest.fixture
def empty_results():
    return {"violations": []}


# ---------------------------------------------------------------------------
# Fake Playwright objects
# ---------------------------------------------------------------------------

class FakePage:
    def __init__(self, results=None, goto_error=None):
        self.results = results if results is not None else {"violations": []}
        self.goto_error = goto_error
        self.visited = []
        self.script_urls = []
        self.evaluate_args = None

    def goto(self, url, **kwargs):
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error

    def add_script_tag(self, url=None, **kwargs):
        self.script_urls.append(url)

    def wait_for_function(self, expression, **kwargs):
        return True

    def evaluate(self, script, arg=None):
        self.evaluate_args = arg
        return self.results


class FakeContext:
    def __init__(self, page):
        self.page = page

    def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    def new_context(self, **kwargs):
        return FakeContext(self.page)

    def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None

    def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser


class FakePlaywright:
    """Stands in for the object yielded by sync_playwright()."""

    def __init__(self, page):
        self.browser = FakeBrowser(page)
        self.chromium = FakeChromium(self.browser)

    def __call__(self):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def fake_playwright_factory():
    """Return a builder for FakePlaywright instances around a FakePage."""
    def _make(results=None, goto_error=None):
        return FakePlaywright(FakePage(results=results, goto_error=goto_error))
    return _make
