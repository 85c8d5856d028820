"""Run the API with uvicorn: ``python -m eventdesk``."""
import uvicorn

from eventdesk.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("eventdesk.app:app", host=settings.host, port=settings.port, reload=settings.app_env == "dev")


if __name__ == "__main__":
    main()
