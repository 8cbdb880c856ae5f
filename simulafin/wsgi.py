"""
WSGI adapter for hosts that only speak WSGI (e.g. PythonAnywhere).
Wraps the ASGI application with a2wsgi.
"""
from a2wsgi import ASGIMiddleware  # type: ignore
from simulafin.main import app

application = ASGIMiddleware(app)  # type: ignore
