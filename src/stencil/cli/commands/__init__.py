"""Root commands (``stencil <command>``)."""
