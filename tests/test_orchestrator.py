import asyncio

import pytest

import src.agent.orchestrator as orchestrator
from src.agent.browser import BrowserSession
from src.agent.profiles import Profile, ProfileRegistry

CAPTURED = {
    "tag": "HTML",
    "attributes": {},
    "visible": True,
    "children": [
        {
            "tag": "BODY",
            "attributes": {},
            "visible": True,
            "root": True,
            "children": [
                {"tag": "A", "attributes": {"href": "/docs", "id": "docs"}, "visible": True, "children": ["Docs"]},
                {"tag": "BUTTON", "attributes": {"class": "primary"}, "visible": True, "children": ["Buy now"]},
            ],
        }
    ],
}


class FakePage:
    url = "http://example.com/shop"

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    async def evaluate(self, script, arg=None):
        self.calls.append(arg)
        return self.payload


class FakeBrowserSession:
    payload = CAPTURED

    def __init__(self, *_args, **_kwargs):
        self.visited = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def goto(self, url, wait_ms=None):
        self.visited.append(url)

    async def capture_snapshot(self, root_selector=None):
        session = BrowserSession()
        session.page = FakePage(self.payload)
        return await session.capture_snapshot(root_selector)


def _registry():
    return ProfileRegistry([Profile(name="webdriver", locators=["id", "linkText", "css"])])


def test_capture_snapshot_uses_selector_and_page_url():
    session = BrowserSession()
    page = FakePage(CAPTURED)
    session.page = page

    snapshot = asyncio.run(session.capture_snapshot("#content"))

    assert page.calls == ["#content"]
    assert snapshot.url == "http://example.com/shop"
    assert snapshot.root.tag_name == "BODY"


def test_capture_snapshot_returns_none_when_root_missing():
    session = BrowserSession()
    session.page = FakePage(None)

    assert asyncio.run(session.capture_snapshot("#missing")) is None


def test_capture_snapshot_requires_open_page():
    with pytest.raises(RuntimeError):
        asyncio.run(BrowserSession().capture_snapshot())


def test_build_model_for_url(monkeypatch):
    monkeypatch.setattr(orchestrator, "BrowserSession", FakeBrowserSession)

    model = orchestrator.build_model_for_url_blocking("http://example.com/shop", profile="webdriver", profiles=_registry())

    assert model.names == ["Docs", "BuyNow"]
    docs, buy = model.entities
    assert docs.selected_locator.name == "id"
    assert buy.selected_locator.name == "css"
    assert buy.selected_locator.locator == "html > body > button"


def test_build_model_for_url_without_root(monkeypatch):
    class MissingRootSession(FakeBrowserSession):
        payload = None

    monkeypatch.setattr(orchestrator, "BrowserSession", MissingRootSession)

    assert orchestrator.build_model_for_url_blocking("http://example.com", root_selector="#nope", profiles=_registry()) is None


def test_build_model_for_html():
    html = '<html><body><main><a href="/a">About us</a></main><footer><a href="/b">Blog</a></footer></body></html>'

    model = orchestrator.build_model_for_html(html, root_selector="main", profile="webdriver", profiles=_registry())

    assert model.names == ["AboutUs"]
    assert model.entities[0].selected_locator.name == "linkText"
    assert model.entities[0].selected_locator.locator == "About us"


def test_build_model_for_html_nothing_found():
    assert orchestrator.build_model_for_html("<html><body><p>hi</p></body></html>", profile="webdriver", profiles=_registry()) is None


def test_build_model_for_html_fragment_without_body():
    html = '<form><input name="q"><button>Go</button></form>'

    model = orchestrator.build_model_for_html(html, profile="webdriver", profiles=_registry())

    assert model is not None
    assert model.names == ["Q", "Go"]
    assert model.entities[1].selected_locator.locator == "html > form > button"
