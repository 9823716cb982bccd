"""Application layer: strategy interfaces."""
