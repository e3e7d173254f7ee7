from hopmap.api.server import TraceAPI, create_app

__all__ = ["TraceAPI", "create_app"]
