"""PDF infrastructure utilities."""

from .page_extractor import LoadedBundle, PageExtractor
from .image_processor import image_to_data_url
from .segment_materializer import SegmentMaterializer

__all__ = ["LoadedBundle", "PageExtractor", "SegmentMaterializer", "image_to_data_url"]
