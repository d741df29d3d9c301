"""Application-level orchestration for the index build."""
