from .open_graph import register  # noqa: F401
