import uvicorn

from bind8.core.app_factory import create_app
from bind8.core.config import settings

app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "bind8.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_level=settings.log.level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
