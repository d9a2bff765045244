import asyncio

import pytest

from loi_service.config import ServiceConfig
from loi_service.errors import RenderError
from loi_service.services.pdf_renderer import (
    ChromiumRenderer,
    WeasyPrintRenderer,
    build_renderer,
)


class _FakePage:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.content = None
        self.pdf_kwargs = None

    async def set_content(self, html, wait_until=None):
        if self.fail_on == "set_content":
            raise TimeoutError("Timeout 30000ms exceeded")
        self.content = (html, wait_until)

    async def pdf(self, **kwargs):
        if self.fail_on == "pdf":
            raise RuntimeError("Target crashed")
        self.pdf_kwargs = kwargs
        return b"%PDF-fake"


class _FakeContext:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class _FakeBrowser:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.contexts = []

    def is_connected(self):
        return True

    async def new_context(self):
        ctx = _FakeContext(_FakePage(self.fail_on))
        self.contexts.append(ctx)
        return ctx

    async def close(self):
        pass


def _renderer(fail_on=None):
    renderer = ChromiumRenderer()
    renderer._browser = _FakeBrowser(fail_on)
    return renderer


def test_chromium_render_uses_fresh_context_per_call_and_closes_it():
    renderer = _renderer()
    out1 = asyncio.run(renderer.render_pdf("<h1>one</h1>"))
    out2 = asyncio.run(renderer.render_pdf("<h1>two</h1>"))

    assert out1 == out2 == b"%PDF-fake"
    contexts = renderer._browser.contexts
    assert len(contexts) == 2
    assert all(c.closed for c in contexts)

    page = contexts[0].page
    assert page.content == ("<h1>one</h1>", "networkidle")
    assert page.pdf_kwargs["format"] == "Letter"
    assert page.pdf_kwargs["print_background"] is True
    assert page.pdf_kwargs["margin"] == {"top": "1in", "right": "1in", "bottom": "1in", "left": "1in"}


@pytest.mark.parametrize("fail_on", ["set_content", "pdf"])
def test_chromium_failure_raises_render_error_and_releases_context(fail_on):
    renderer = _renderer(fail_on)
    with pytest.raises(RenderError):
        asyncio.run(renderer.render_pdf("<p>x</p>"))
    assert [c.closed for c in renderer._browser.contexts] == [True]


def test_engine_message_is_kept():
    renderer = _renderer("set_content")
    with pytest.raises(RenderError) as exc:
        asyncio.run(renderer.render_pdf("<p>x</p>"))
    assert exc.value.message == "Timeout 30000ms exceeded"


@pytest.mark.parametrize("html", [None, "", "   "])
def test_empty_html_is_rejected_before_touching_the_engine(html):
    renderer = _renderer()
    with pytest.raises(RenderError):
        asyncio.run(renderer.render_pdf(html))
    assert renderer._browser.contexts == []


def test_weasyprint_engine_wraps_failures(monkeypatch):
    renderer = WeasyPrintRenderer()

    def boom(html):
        raise ValueError("bad stylesheet")

    monkeypatch.setattr(renderer, "_write_pdf", boom)
    with pytest.raises(RenderError) as exc:
        asyncio.run(renderer.render_pdf("<p>x</p>"))
    assert exc.value.message == "bad stylesheet"


def test_weasyprint_engine_returns_bytes(monkeypatch):
    renderer = WeasyPrintRenderer()
    monkeypatch.setattr(renderer, "_write_pdf", lambda html: b"%PDF-" + html.encode())
    assert asyncio.run(renderer.render_pdf("<p>x</p>")) == b"%PDF-<p>x</p>"


def test_build_renderer_selects_engine():
    assert isinstance(build_renderer(ServiceConfig(pdf_engine="chromium")), ChromiumRenderer)
    assert isinstance(build_renderer(ServiceConfig(pdf_engine="weasyprint")), WeasyPrintRenderer)
    with pytest.raises(ValueError):
        build_renderer(ServiceConfig(pdf_engine="wkhtmltopdf"))
