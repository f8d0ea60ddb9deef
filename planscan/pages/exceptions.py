class PageRenderError(Exception):
    """Raised when a PDF cannot be rasterized into page images."""
