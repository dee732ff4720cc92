"""FreeShow Triggers - clickable FreeShow controls inside markdown documents.

Inline markup such as ``>> [Intro]`` or ``=> |Sunday Service|`` is turned into
buttons that select the named slide or show through FreeShow's HTTP API.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def _setup_logging(log_dir: Path) -> None:
    """Configure logging to both console and rotating file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "freeshow-triggers.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Silence noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main(*, reload: bool = False) -> None:
    """Entry point for the FreeShow Triggers web application."""
    from nicegui import app, ui

    from freeshow_triggers.config import get_settings
    from freeshow_triggers.preferences import get_preference_store

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    # Serve trigger button JS/CSS
    _static_dir = Path(__file__).parent / "static"
    app.add_static_files("/static", str(_static_dir))

    import freeshow_triggers.pages  # noqa: F401 - registers routes

    store = get_preference_store()
    print(f"FreeShow Triggers v{__version__}")
    print(f"FreeShow endpoint: {store.settings.freeshow.endpoint or '(default)'}")
    print(f"Starting application on http://{settings.app.host}:{settings.app.port}")

    ui.run(
        host=settings.app.host,
        port=settings.app.port,
        title="FreeShow Triggers",
        reload=reload,
        storage_secret=settings.app.storage_secret.get_secret_value(),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
