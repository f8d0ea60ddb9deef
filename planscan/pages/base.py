from abc import ABC, abstractmethod

from planscan.pages.models import PageImage


class BasePageSource(ABC):
    """Contract for all PDF page rasterization adapters."""

    def __init__(self, scale: float = 1.5) -> None:
        self._scale = scale

    @property
    def scale(self) -> float:
        return self._scale

    @abstractmethod
    def render(self, pdf_bytes: bytes) -> list[PageImage]:
        """Rasterize every page of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One PNG image per page, ordered by 1-based page number.

        Raises:
            PageRenderError: if rendering fails for any reason.
        """
