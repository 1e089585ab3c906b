"""
Stream protocol tests. Package-style so `tests.stream_samples` is importable from test modules.
"""
