"""Application interfaces."""
from .path_finder import PathFinder
from .curve_drawer import CurveDrawer

__all__ = ['PathFinder', 'CurveDrawer']
