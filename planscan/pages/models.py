from dataclasses import dataclass, field


@dataclass(frozen=True)
class PageImage:
    """One rasterized PDF page as PNG bytes."""

    page_number: int
    image_data: bytes = field(repr=False)
