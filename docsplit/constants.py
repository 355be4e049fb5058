from __future__ import annotations

# Single source of truth for static constants.

# Pages classified concurrently per window.
DEFAULT_WINDOW_SIZE = 5

# Boundary flags (is_first_page / is_last_page) only count above this confidence.
BOUNDARY_CONFIDENCE_THRESHOLD = 80

# Confidence scale reported by the classifier.
CONFIDENCE_MIN = 0
CONFIDENCE_MAX = 100

# Unknown segments whose end_page - start_page is below this are not materialized.
UNKNOWN_SEGMENT_MIN_SPAN = 2

# Zoom factor used when rasterising a page for the vision model.
DEFAULT_RENDER_ZOOM = 2.0
