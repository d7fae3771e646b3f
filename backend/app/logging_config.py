import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path("logs")

FORMAT = (
    "%(asctime)s | %(levelname)-7s | %(name)s | "
    "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
)
formatter = logging.Formatter(FORMAT)


def _file_handler(path: Path, level=logging.INFO) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    for h in logger.handlers:
        if getattr(h, "baseFilename", None) == getattr(handler, "baseFilename", None):
            handler.close()
            return
    logger.addHandler(handler)


def bind_environment_logger(backend: str, log_dir: Path = LOG_DIR) -> None:
    """Route one plugin environment backend (memory/filesystem/rest) to its own file."""
    env_dir = log_dir / "environments"
    env_dir.mkdir(parents=True, exist_ok=True)

    env_logger = logging.getLogger(f"backend.app.extensions.environment.{backend}")
    _attach(env_logger, _file_handler(env_dir / f"{backend}.log", level=logging.DEBUG))
    env_logger.propagate = False


def setup_logging(log_dir: Path = LOG_DIR) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # --- Core ---
    core_parent = logging.getLogger("backend.app")
    _attach(core_parent, _file_handler(log_dir / "core.log"))
    core_parent.propagate = False

    # --- Extensions (registry, store, lifecycle) ---
    extensions_parent = logging.getLogger("backend.app.extensions")
    _attach(extensions_parent, _file_handler(log_dir / "extensions.log", level=logging.DEBUG))
    extensions_parent.propagate = False
