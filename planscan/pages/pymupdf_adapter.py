import pymupdf

from planscan.pages.base import BasePageSource
from planscan.pages.exceptions import PageRenderError
from planscan.pages.models import PageImage


class PyMuPdfPageSource(BasePageSource):
    """Renders PDF pages to PNG using PyMuPDF."""

    def render(self, pdf_bytes: bytes) -> list[PageImage]:
        try:
            matrix = pymupdf.Matrix(self._scale, self._scale)
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [
                    PageImage(
                        page_number=page.number + 1,
                        image_data=page.get_pixmap(matrix=matrix).tobytes("png"),
                    )
                    for page in doc
                ]
        except Exception as exc:
            raise PageRenderError(f"pymupdf rendering failed: {exc}") from exc
