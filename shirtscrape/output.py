"""Output files: the dated CSV data file and the append-only error log.

Both live in the same output directory. The data file is named after the
local calendar date without zero padding (``2026-3-7.csv``) and is replaced
on every successful run of that day. The error log is never truncated.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

from shirtscrape.common.exceptions import OutputWriteException
from shirtscrape.models import CSV_FIELDS, ProductRecord

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("data")
ERROR_LOG_NAME = "scraper-error.log"


def data_file_name(day: date) -> str:
    return f"{day.year}-{day.month}-{day.day}.csv"


def data_file_path(output_dir: Path, day: date | None = None) -> Path:
    """Path of the data file for *day* (today, local time, by default)."""
    return output_dir / data_file_name(day or date.today())


def error_log_path(output_dir: Path, name: str = ERROR_LOG_NAME) -> Path:
    return output_dir / name


def ensure_output_dir(output_dir: Path) -> bool:
    """Create the output directory if it is missing.

    Returns:
        True if the directory had to be created.
    """
    if output_dir.is_dir():
        return False
    logger.info(f"No {output_dir}/ folder exists")
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Folder {output_dir}/ created")
    return True


def records_to_csv(records: Iterable[ProductRecord]) -> str:
    """Serialize records with the ``Title,Price,ImageURL,URL,Time`` header.

    Values containing commas, quotes or newlines are quoted per RFC 4180.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer, fieldnames=list(CSV_FIELDS), lineterminator="\n"
    )
    writer.writeheader()
    for record in records:
        writer.writerow(record.to_row())
    return buffer.getvalue()


def write_data_file(payload: str, path: Path) -> Path:
    """Write the CSV payload, replacing any file already at *path*.

    Raises:
        OutputWriteException: If the file cannot be written.
    """
    logger.info(f"Creating file: '{path}'")
    if path.exists():
        logger.warning(f"File '{path}' already exists, overwriting")

    try:
        path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise OutputWriteException(str(path), str(e)) from e
    return path


def format_error_time(moment: datetime | None = None) -> str:
    """Local time in the style ``Mon Oct 19 2026 14:03:07 GMT+0200 (CEST)``."""
    local = (moment or datetime.now()).astimezone()
    return local.strftime("%a %b %d %Y %H:%M:%S GMT%z (%Z)")


def format_error_line(message: str, moment: datetime | None = None) -> str:
    return f"[ {format_error_time(moment)} ] {message}\n"


class ErrorLog:
    """Append-only log of the errors met during runs.

    Attributes:
        path: Location of the log file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def append(self, message: str, moment: datetime | None = None) -> bool:
        """Append one line for *message*.

        Multi-line messages are folded onto a single line so the file keeps
        one entry per line. A failure to write is only reported to the
        console, since there is nowhere else to report it.

        Returns:
            True if the line was written.
        """
        single_line = " | ".join(
            part.strip() for part in message.splitlines() if part.strip()
        )
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(format_error_line(single_line, moment))
        except OSError as e:
            logger.error(
                f"There was an error appending to {self.path}: {e}"
            )
            return False
        return True
