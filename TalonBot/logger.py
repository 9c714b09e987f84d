"""
TalonBot Logger - Persistent file-based logging.

Writes levelled log lines to rotating files under logs/ so a match can be
reviewed after the fact, frame by frame, without relying on in-game chat.

Usage
-----
    from TalonBot.logger import get_logger

    log = get_logger()          # module-level logger
    log.info("Bot started")
    log.debug("Placement search ring %d", dist, frame=1234)
    log.warning("Base is supersaturated", frame=1234)

    # Game-specific helpers
    log.game_event("REFINERY_DONE", "base @ (1024, 2048)", frame=1234)
    log.agent_task("Worker", unit_id=42, old_task="IDLE", new_task="MINERALS", frame=1234)

The log file lives at  logs/talon_<timestamp>.log  in the working directory.
Old log files are kept for up to LOG_BACKUP_COUNT rotations.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# ── Configuration ────────────────────────────────────────────────────────────

LOG_DIR          = Path("logs")         # Relative to CWD
LOG_LEVEL        = logging.DEBUG        # File log level
CONSOLE_LEVEL    = logging.INFO         # Console level
LOG_BACKUP_COUNT = 10
MAX_BYTES        = 5 * 1024 * 1024      # 5 MB per file before rotating


# ── Custom log levels ─────────────────────────────────────────────────────────

GAME_EVENT_LEVEL = 25   # between INFO (20) and WARNING (30)
AGENT_LEVEL      = 15   # between DEBUG (10) and INFO (20)

logging.addLevelName(GAME_EVENT_LEVEL, "GAME")
logging.addLevelName(AGENT_LEVEL,      "AGENT")


# ── Custom formatter ──────────────────────────────────────────────────────────

class TalonFormatter(logging.Formatter):
    """
    Prefixes each record with the host frame number when one was passed
    through the 'frame' keyword.

    Example output:
        2026-10-18 21:14:03.412 | INFO    |       - | Bot started
        2026-10-18 21:14:05.001 | GAME    |    1280 | REFINERY_DONE | base @ (1024, 2048)
        2026-10-18 21:14:05.002 | AGENT   |    1280 | Worker | id=42 IDLE -> MINERALS
    """

    BASE_FMT = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(frame_col)8s | %(message)s"
    DATE_FMT = "%Y-%m-%d %H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        frame = getattr(record, "frame", None)
        record.frame_col = "-" if frame is None else str(frame)
        record.levelname = record.levelname[:7]
        return super().format(record)


# ── Logger factory ────────────────────────────────────────────────────────────

_logger_instance: Optional["TalonLogger"] = None


def get_logger(name: str = "talon") -> "TalonLogger":
    """
    Return the singleton TalonLogger, creating it on first call.

        log = get_logger()
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = TalonLogger(name)
    return _logger_instance


class TalonLogger:
    """
    The bot's logger: a rotating file under logs/ at DEBUG, stdout at INFO,
    and the game_event / agent_task helpers on top of the usual levels.
    """

    def __init__(self, name: str = "talon") -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(LOG_LEVEL)

        # Re-initialisation must not stack handlers
        if self._logger.handlers:
            return

        self._setup_handlers()

    # ── Setup ─────────────────────────────────────────────────────────────────

    def _setup_handlers(self) -> None:
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file  = LOG_DIR / f"talon_{timestamp}.log"

        formatter = TalonFormatter(
            fmt     = TalonFormatter.BASE_FMT,
            datefmt = TalonFormatter.DATE_FMT,
        )

        file_handler = logging.handlers.RotatingFileHandler(
            filename    = log_file,
            maxBytes    = MAX_BYTES,
            backupCount = LOG_BACKUP_COUNT,
            encoding    = "utf-8",
        )
        file_handler.setLevel(LOG_LEVEL)
        file_handler.setFormatter(formatter)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(CONSOLE_LEVEL)
        console_handler.setFormatter(formatter)

        self._logger.addHandler(file_handler)
        self._logger.addHandler(console_handler)

        self._logger.info("Logger initialised, writing to %s", log_file.resolve())

    # ── Standard log levels ───────────────────────────────────────────────────

    def debug(self, msg: str, *args, frame: Optional[int] = None, **kwargs) -> None:
        self._logger.debug(msg, *args, extra={"frame": frame}, **kwargs)

    def info(self, msg: str, *args, frame: Optional[int] = None, **kwargs) -> None:
        self._logger.info(msg, *args, extra={"frame": frame}, **kwargs)

    def warning(self, msg: str, *args, frame: Optional[int] = None, **kwargs) -> None:
        self._logger.warning(msg, *args, extra={"frame": frame}, **kwargs)

    def error(self, msg: str, *args, frame: Optional[int] = None, **kwargs) -> None:
        self._logger.error(msg, *args, extra={"frame": frame}, **kwargs)

    def exception(self, msg: str, *args, frame: Optional[int] = None, **kwargs) -> None:
        self._logger.exception(msg, *args, extra={"frame": frame}, **kwargs)

    # ── Game-specific helpers ─────────────────────────────────────────────────

    def game_event(
        self,
        event_type: str,
        detail: str,
        frame: Optional[int] = None,
    ) -> None:
        """
        Log a significant named game event (bot start, refinery complete,
        base lost, ...).

        Example:
            log.game_event("BASE_LOST", "depot destroyed @ (1024, 2048)", frame=9000)
        """
        self._logger.log(
            GAME_EVENT_LEVEL,
            "%s | %s",
            event_type.upper(),
            detail,
            extra={"frame": frame},
        )

    def agent_task(
        self,
        agent_name: str,
        unit_id: int,
        old_task: str,
        new_task: str,
        frame: Optional[int] = None,
    ) -> None:
        """
        Log a unit agent's task transition.

        Example:
            log.agent_task("RangedAgent", unit_id=77, old_task="ATTACK_RUN",
                           new_task="RETREATING", frame=1280)
        """
        self._logger.log(
            AGENT_LEVEL,
            "%s | id=%s %s -> %s",
            agent_name,
            unit_id,
            old_task,
            new_task,
            extra={"frame": frame},
        )
