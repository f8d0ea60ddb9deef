import io

import pdfplumber

from planscan.pages.base import BasePageSource
from planscan.pages.exceptions import PageRenderError
from planscan.pages.models import PageImage

_POINTS_PER_INCH = 72


class PdfPlumberPageSource(BasePageSource):
    """Renders PDF pages to PNG using pdfplumber."""

    def render(self, pdf_bytes: bytes) -> list[PageImage]:
        resolution = int(_POINTS_PER_INCH * self._scale)
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [
                    PageImage(
                        page_number=page.page_number,
                        image_data=self._to_png(page.to_image(resolution=resolution)),
                    )
                    for page in pdf.pages
                ]
        except Exception as exc:
            raise PageRenderError(f"pdfplumber rendering failed: {exc}") from exc

    @staticmethod
    def _to_png(page_image: "pdfplumber.display.PageImage") -> bytes:
        buf = io.BytesIO()
        page_image.original.save(buf, format="PNG")
        return buf.getvalue()
