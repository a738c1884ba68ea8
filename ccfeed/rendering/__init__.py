"""CCTray XML and JSON rendering of feed entries."""

from .renderer import CCTRAY_CONTENT_TYPE, FeedRenderer, FeedRenderError

__all__ = ["FeedRenderer", "FeedRenderError", "CCTRAY_CONTENT_TYPE"]
