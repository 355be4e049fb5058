"""Split multi-document PDF bundles into one PDF per logical document."""

__version__ = "0.1.0"
