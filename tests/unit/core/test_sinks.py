"""
Tests for output sinks.
"""

import io

import pytest

from network_activity_logger.core.config import ActivityLoggerConfig, OutputDestination
from network_activity_logger.core.exceptions import SinkIOError
from network_activity_logger.core.formatter import Record
from network_activity_logger.core.sinks import (
    DIVIDER,
    ConsoleSink,
    MultipleFilesSink,
    SingleFileSink,
    StatusMarker,
    create_sink,
)

START = Record("users", "GET 'https://h/users'")
SUCCESS = Record("users", "200 'https://h/users' [0.1000 s]", is_reply=True)
FAILURE = Record("users", "[Error] GET 'https://h/users' [0.1000 s]:\nConnection error", is_reply=True, is_error=True)


class TestStatusMarker:
    """Marker selection."""

    def test_markers(self):
        assert StatusMarker.for_record(START) == StatusMarker.START
        assert StatusMarker.for_record(SUCCESS) == StatusMarker.SUCCESS
        assert StatusMarker.for_record(FAILURE) == StatusMarker.ERROR

    def test_markers_are_distinct(self):
        assert len({StatusMarker.START, StatusMarker.SUCCESS, StatusMarker.ERROR}) == 3


class TestConsoleSink:
    """Console output."""

    def test_divider_body_divider(self):
        stream = io.StringIO()
        ConsoleSink(stream).send(START)

        assert stream.getvalue() == f"{DIVIDER}\nGET 'https://h/users'\n{DIVIDER}\n"

    def test_default_stream_is_stdout(self, capsys):
        ConsoleSink().send(SUCCESS)

        captured = capsys.readouterr()
        assert "200 'https://h/users' [0.1000 s]" in captured.out
        assert captured.err == ""

    def test_closed_stream_raises_sink_error(self):
        stream = io.StringIO()
        stream.close()

        with pytest.raises(SinkIOError):
            ConsoleSink(stream).send(START)


class TestSingleFileSink:
    """Single file output."""

    def test_banner_and_body(self, tmp_path):
        sink = SingleFileSink(tmp_path, "activity.log")
        sink.prepare()
        sink.send(START)
        sink.send(SUCCESS)
        sink.send(FAILURE)
        sink.close()

        content = (tmp_path / "activity.log").read_text(encoding="utf-8")
        assert content == (
            "#1 --- users\nGET 'https://h/users'\n\n"
            "#2 +++ users\n200 'https://h/users' [0.1000 s]\n\n"
            "#3 !!! users\n[Error] GET 'https://h/users' [0.1000 s]:\nConnection error\n\n"
        )

    def test_prepare_clears_directory(self, tmp_path):
        directory = tmp_path / "logs"
        directory.mkdir()
        (directory / "stale.log").write_text("old")
        (directory / "nested").mkdir()

        sink = SingleFileSink(directory, "activity.log")
        sink.prepare()

        assert directory.is_dir()
        assert list(directory.iterdir()) == []

    def test_prepare_resets_sequence(self, tmp_path):
        sink = SingleFileSink(tmp_path / "logs", "activity.log")
        sink.prepare()
        sink.send(START)
        assert sink.sequence == 1

        sink.close()
        sink.prepare()
        assert sink.sequence == 0

    def test_recreates_missing_directory(self, tmp_path):
        directory = tmp_path / "logs"
        sink = SingleFileSink(directory, "activity.log")
        sink.send(START)
        sink.close()

        assert (directory / "activity.log").exists()

    def test_unwritable_path_raises_sink_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        sink = SingleFileSink(blocker, "activity.log")

        with pytest.raises(SinkIOError):
            sink.send(START)

    def test_close_is_idempotent(self, tmp_path):
        sink = SingleFileSink(tmp_path, "activity.log")
        sink.send(START)
        sink.close()
        sink.close()

    def test_context_manager(self, tmp_path):
        with SingleFileSink(tmp_path, "activity.log") as sink:
            sink.send(START)

        assert sink._file is None

    def test_send_after_close_refused(self, tmp_path):
        sink = SingleFileSink(tmp_path, "activity.log")
        sink.send(START)
        sink.close()

        with pytest.raises(SinkIOError, match="closed"):
            sink.send(SUCCESS)

        assert sink._file is None
        assert (tmp_path / "activity.log").read_text(encoding="utf-8").count("#") == 1


class TestMultipleFilesSink:
    """One file per record."""

    def test_file_per_record(self, tmp_path):
        sink = MultipleFilesSink(tmp_path)
        sink.prepare()
        sink.send(START)
        sink.send(SUCCESS)
        sink.send(FAILURE)

        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == ["1 --- users.log", "2 +++ users.log", "3 !!! users.log"]

    def test_body_only(self, tmp_path):
        sink = MultipleFilesSink(tmp_path)
        sink.send(SUCCESS)

        assert (tmp_path / "1 +++ users.log").read_text(encoding="utf-8") == SUCCESS.body + "\n"

    def test_file_name(self, tmp_path):
        sink = MultipleFilesSink(tmp_path)
        assert sink.file_name(12, FAILURE) == "12 !!! users.log"

    def test_sequence_increments(self, tmp_path):
        sink = MultipleFilesSink(tmp_path)
        for _ in range(5):
            sink.send(START)
        assert sink.sequence == 5

    def test_send_after_close_refused(self, tmp_path):
        sink = MultipleFilesSink(tmp_path)
        sink.close()

        with pytest.raises(SinkIOError):
            sink.send(START)

        assert list(tmp_path.iterdir()) == []


class TestCreateSink:
    """Destination to sink mapping."""

    def test_console(self):
        sink = create_sink(ActivityLoggerConfig())
        assert isinstance(sink, ConsoleSink)
        assert sink.destination is OutputDestination.CONSOLE

    def test_single_file(self, tmp_path):
        config = ActivityLoggerConfig.create(
            destination="single_file", log_directory=tmp_path, single_file_name="x.log"
        )
        sink = create_sink(config)

        assert isinstance(sink, SingleFileSink)
        assert sink.path == tmp_path / "x.log"

    def test_multiple_files(self, tmp_path):
        config = ActivityLoggerConfig.create(destination="multiple_files", log_directory=tmp_path)
        sink = create_sink(config)

        assert isinstance(sink, MultipleFilesSink)
        assert sink.directory == tmp_path

    def test_console_stream_override(self):
        stream = io.StringIO()
        sink = create_sink(ActivityLoggerConfig(), stream)
        assert sink.stream is stream
