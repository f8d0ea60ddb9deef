from planscan.config.settings import Settings
from planscan.pages.base import BasePageSource
from planscan.pages.pdfplumber_adapter import PdfPlumberPageSource
from planscan.pages.pymupdf_adapter import PyMuPdfPageSource


class PageSourceFactory:
    """Picks the page rasterizer named by ``page_engine`` (``pymupdf`` by default)."""

    ADAPTERS: dict[str, type[BasePageSource]] = {
        "pymupdf": PyMuPdfPageSource,
        "pdfplumber": PdfPlumberPageSource,
    }

    @classmethod
    def engines(cls) -> list[str]:
        return sorted(cls.ADAPTERS)

    @classmethod
    def create(cls, settings: Settings, engine: str | None = None) -> BasePageSource:
        """Build a page source at the configured render scale.

        ``engine`` overrides ``settings.page_engine`` when given.
        """
        name = (engine or settings.page_engine).lower()
        adapter_cls = cls.ADAPTERS.get(name)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown page engine '{name}'. Choose from: {', '.join(cls.engines())}"
            )
        return adapter_cls(scale=settings.page_render_scale)
