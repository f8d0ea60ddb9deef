import pytest

from planscan.pages.base import BasePageSource
from planscan.pages.exceptions import PageRenderError
from planscan.pages.pdfplumber_adapter import PdfPlumberPageSource
from planscan.pages.pymupdf_adapter import PyMuPdfPageSource

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture(params=[PyMuPdfPageSource, PdfPlumberPageSource], ids=["pymupdf", "pdfplumber"])
def page_source(request: pytest.FixtureRequest) -> BasePageSource:
    return request.param(scale=1.0)


class TestRender:
    def test_single_page(self, page_source: BasePageSource, sample_pdf_bytes: bytes) -> None:
        pages = page_source.render(sample_pdf_bytes)
        assert len(pages) == 1
        assert pages[0].page_number == 1
        assert pages[0].image_data.startswith(PNG_SIGNATURE)

    def test_pages_ordered_by_number(
        self, page_source: BasePageSource, multi_page_pdf_bytes: bytes
    ) -> None:
        pages = page_source.render(multi_page_pdf_bytes)
        assert [p.page_number for p in pages] == [1, 2]
        assert all(p.image_data.startswith(PNG_SIGNATURE) for p in pages)

    def test_raises_on_invalid_bytes(self, page_source: BasePageSource) -> None:
        with pytest.raises(PageRenderError):
            page_source.render(b"not a pdf")


class TestScale:
    def test_higher_scale_renders_larger_image(self, sample_pdf_bytes: bytes) -> None:
        small = PyMuPdfPageSource(scale=0.5).render(sample_pdf_bytes)[0]
        large = PyMuPdfPageSource(scale=2.0).render(sample_pdf_bytes)[0]
        assert len(large.image_data) > len(small.image_data)
