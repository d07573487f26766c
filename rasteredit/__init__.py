"""
Deterministic pixel-grid transforms for a raster image editor.
"""
__version__ = "1.0.0"
