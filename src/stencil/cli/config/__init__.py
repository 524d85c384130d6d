"""Configuration commands (``stencil config ...``)."""
