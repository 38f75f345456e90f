from __future__ import annotations

import logging
import os
from pathlib import Path

_CONFIGURED = False


def configure_logging() -> None:
    """
    Configure application-wide logging once.

    Respects PORTFOLIO_LOG_LEVEL (defaults to INFO). When PORTFOLIO_LOG_DIR is
    set, records go to ``portfolio.log`` inside that directory instead of stderr.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return
    level_name = os.getenv("PORTFOLIO_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    log_dir_raw = os.getenv("PORTFOLIO_LOG_DIR", "")
    handlers = None
    if log_dir_raw:
        log_dir = Path(log_dir_raw).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_dir / "portfolio.log", encoding="utf-8")]
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
    # Streamlit's watcher is chatty at INFO.
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    logging.getLogger("streamlit").setLevel(logging.WARNING)
    _CONFIGURED = True
