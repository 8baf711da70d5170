"""Application services shared by several handlers."""
