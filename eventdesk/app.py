"""ASGI entry point: ``uvicorn eventdesk.app:app``."""
from eventdesk.app_factory import create_app

app = create_app()
