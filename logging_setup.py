import logging
import sys
from pathlib import Path
from typing import Optional, Union

import config

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    *,
    log_dir: Union[str, Path] = config.LOG_DIR,
    level: str = config.LOG_LEVEL,
    console: Optional[bool] = None,
) -> None:
    """
    Configure the root logger:
    - console handler (silent in production unless asked for)
    - LOG_DIR/app.log with everything at `level`
    - LOG_DIR/errors.log with ERROR and above

    Call this once at startup, before the first request is served.
    """
    if console is None:
        console = config.APP_ENV != "production"

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(fmt)
        root.addHandler(ch)

    fh = logging.FileHandler(str(log_dir / "app.log"), encoding="utf-8")
    fh.setFormatter(fmt)
    root.addHandler(fh)

    eh = logging.FileHandler(str(log_dir / "errors.log"), encoding="utf-8")
    eh.setLevel(logging.ERROR)
    eh.setFormatter(fmt)
    root.addHandler(eh)

    logging.captureWarnings(True)
