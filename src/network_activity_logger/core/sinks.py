"""
Output sinks for activity records.

A sink receives finished Records and writes them somewhere. send() raises
SinkIOError on write failures; the activity logger swallows it. Sinks are
driven from the logger's single worker thread, but sequence numbering and file
handles are still guarded by a lock so a sink can be used on its own.
"""

import shutil
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional, TextIO

from .config import ActivityLoggerConfig, OutputDestination
from .exceptions import SinkIOError
from .formatter import Record

DIVIDER = "-" * 80


class StatusMarker:
    """
    Three-glyph status markers used in banners and file names.

    Chosen to be valid in file names on all common platforms.
    """
    START = "---"
    SUCCESS = "+++"
    ERROR = "!!!"

    @classmethod
    def for_record(cls, record: Record) -> str:
        if not record.is_reply:
            return cls.START
        if record.is_error:
            return cls.ERROR
        return cls.SUCCESS


class Sink(ABC):
    """Base class for all sinks."""

    destination: OutputDestination

    def prepare(self) -> None:
        """One-time setup, run before the sink receives its first record."""

    @abstractmethod
    def send(self, record: Record) -> None:
        """
        Write one record.

        Raises:
            SinkIOError: the record could not be written
        """

    def close(self) -> None:
        """Release resources. Idempotent."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ConsoleSink(Sink):
    """
    Writes divider, body, divider to stdout.

    The stream is looked up on every write unless one is given explicitly, so
    redirected or captured sys.stdout is honored.
    """

    destination = OutputDestination.CONSOLE

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def send(self, record: Record) -> None:
        text = f"{DIVIDER}\n{record.body}\n{DIVIDER}\n"
        with self._lock:
            try:
                stream = self.stream
                stream.write(text)
                stream.flush()
            except (OSError, ValueError) as e:
                # ValueError: write to a closed stream
                raise SinkIOError(f"Console write failed: {e}")


class _FileSink(Sink):
    """Shared behaviour of the file-based sinks."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._sequence = 0
        self._lock = threading.Lock()
        self._closed = False

    @property
    def sequence(self) -> int:
        """Number of the last record written."""
        return self._sequence

    def prepare(self) -> None:
        """
        Remove the log directory with everything in it and recreate it empty.

        Raises:
            SinkIOError: the directory could not be reset
        """
        with self._lock:
            try:
                if self.directory.exists():
                    shutil.rmtree(self.directory)
                self.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise SinkIOError(f"Could not reset log directory: {e}", path=str(self.directory))
            self._sequence = 0

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _check_open(self) -> None:
        if self._closed:
            raise SinkIOError("Sink is closed", path=str(self.directory))

    def _ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def close(self) -> None:
        """Refuse further writes and release open files."""
        with self._lock:
            self._closed = True
            self._release()

    def _release(self) -> None:
        pass


class SingleFileSink(_FileSink):
    """
    Appends every record to one file, each preceded by a banner line
    ``#<sequence> <marker> <identifier>``.

    The file is created on the first write and kept open in append mode
    until close().
    """

    destination = OutputDestination.SINGLE_FILE

    def __init__(self, directory: Path, file_name: str):
        super().__init__(directory)
        self.path = self.directory / file_name
        self._file: Optional[IO[str]] = None

    def send(self, record: Record) -> None:
        with self._lock:
            self._check_open()
            try:
                if self._file is None or self._file.closed:
                    self._ensure_directory()
                    self._file = open(self.path, "a", encoding="utf-8")
                sequence = self._next_sequence()
                marker = StatusMarker.for_record(record)
                self._file.write(f"#{sequence} {marker} {record.identifier}\n{record.body}\n\n")
                self._file.flush()
            except (OSError, ValueError) as e:
                self._release()
                raise SinkIOError(f"Log file write failed: {e}", path=str(self.path))

    def _release(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError:
                pass
            self._file = None


class MultipleFilesSink(_FileSink):
    """
    One file per record: ``<sequence> <marker> <identifier>.log``.

    Only the body is written; the file name carries sequence and status.
    """

    destination = OutputDestination.MULTIPLE_FILES

    def file_name(self, sequence: int, record: Record) -> str:
        return f"{sequence} {StatusMarker.for_record(record)} {record.identifier}.log"

    def send(self, record: Record) -> None:
        with self._lock:
            self._check_open()
            sequence = self._next_sequence()
            path = self.directory / self.file_name(sequence, record)
            try:
                self._ensure_directory()
                with open(path, "a", encoding="utf-8") as f:
                    f.write(record.body)
                    f.write("\n")
            except OSError as e:
                raise SinkIOError(f"Log file write failed: {e}", path=str(path))


def create_sink(config: ActivityLoggerConfig, stream: Optional[TextIO] = None) -> Sink:
    """
    Build the sink for config.destination (prepare() is not called).

    Args:
        config: Logger configuration
        stream: Console stream override (ConsoleSink only)
    """
    destination = config.destination

    if destination is OutputDestination.CONSOLE:
        return ConsoleSink(stream)
    if destination is OutputDestination.SINGLE_FILE:
        return SingleFileSink(config.log_directory, config.single_file_name)
    if destination is OutputDestination.MULTIPLE_FILES:
        return MultipleFilesSink(config.log_directory)

    raise ValueError(f"Unknown destination: {destination}")
