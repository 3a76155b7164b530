"""Main FastAPI application entry point."""

from dotenv import load_dotenv

from fishify.config import BASE_DIR, get_settings
from fishify.core.app_factory import create_app
from fishify.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(BASE_DIR / ".env")

settings = get_settings()
setup_logging(settings.log_level, settings.log_file)

app = create_app()


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "fishify API", "docs": "/docs"}


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "fishify.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
