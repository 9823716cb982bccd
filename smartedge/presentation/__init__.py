"""Presentation layer: SVG drawers and the command line interface."""
