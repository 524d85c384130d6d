"""Stencil core: template compiler, configuration, and shared utilities."""
