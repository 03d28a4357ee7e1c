import shutil
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fusion.logger.config import FileConfig, LogFormat, RotationConfig
from fusion.logger.writer import RecoveryStrategy, RotatingFileWriter

ALNUM = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def _config(path, append=True, max_size=1024 * 1024, max_files=5):
    return FileConfig(
        enabled=True,
        path=path,
        append=append,
        format=LogFormat.FULL,
        rotation=RotationConfig(max_size=max_size, max_files=max_files),
    )


@settings(max_examples=25, deadline=None)
@given(
    subdir=st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=5),
    stem=st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=5),
)
def test_creates_parent_directories(subdir, stem):
    with tempfile.TemporaryDirectory() as tmp:
        nested = Path(tmp) / subdir / f"{stem}.log"
        with RotatingFileWriter(_config(nested)):
            assert nested.parent.is_dir()
            assert nested.exists()


@settings(max_examples=25, deadline=None)
@given(
    append=st.booleans(),
    initial=st.text(alphabet=ALNUM, min_size=10, max_size=50),
    new=st.text(alphabet=ALNUM, min_size=10, max_size=50),
)
def test_append_and_truncate_modes(append, initial, new):
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "test.log"
        path.write_text(initial)
        with RotatingFileWriter(_config(path, append=append)) as writer:
            writer.write(new.encode())
            writer.flush()
        content = path.read_text()
        if append:
            assert content == initial + new
        else:
            assert content == new


@pytest.mark.parametrize("strategy", list(RecoveryStrategy))
def test_successful_write_with_every_strategy(tmp_path, strategy):
    path = tmp_path / "test.log"
    content = b"abcdefghij0123456789"
    writer = RotatingFileWriter(_config(path), strategy, None)
    assert writer.write(content) == len(content)
    writer.flush()
    assert path.read_bytes() == content
    assert not writer.is_in_fallback_mode()
    writer.close()


def test_invalid_path_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(OSError):
        RotatingFileWriter(_config(blocker / "sub" / "app.log"))


def test_callback_not_called_on_success(tmp_path):
    calls = []
    writer = RotatingFileWriter(
        _config(tmp_path / "test.log"), RecoveryStrategy.FALLBACK_TO_CONSOLE, calls.append
    )
    writer.write(b"some content here")
    writer.flush()
    assert calls == []
    writer.close()


def test_fallback_mode_off_initially_and_after_write(tmp_path):
    writer = RotatingFileWriter(_config(tmp_path / "test.log"))
    assert writer.is_in_fallback_mode() is False
    writer.write("content written")
    assert writer.is_in_fallback_mode() is False
    writer.close()


def test_text_is_utf8_encoded(tmp_path):
    path = tmp_path / "test.log"
    with RotatingFileWriter(_config(path)) as writer:
        assert writer.write("héllo") == 6
    assert path.read_text(encoding="utf-8") == "héllo"


def test_existing_size_counts_in_append_mode(tmp_path):
    path = tmp_path / "test.log"
    path.write_bytes(b"0123456789")
    with RotatingFileWriter(_config(path, max_size=10)) as writer:
        writer.write(b"new")
    assert path.read_bytes() == b"new"
    rotated = [p for p in tmp_path.iterdir() if p.name != "test.log"]
    assert len(rotated) == 1
    assert rotated[0].read_bytes() == b"0123456789"


def test_rotates_when_size_reached(tmp_path):
    path = tmp_path / "test.log"
    with RotatingFileWriter(_config(path, max_size=10)) as writer:
        writer.write(b"0123456789")
        writer.write(b"abc")
    assert path.read_bytes() == b"abc"
    rotated = [p for p in tmp_path.iterdir() if p.name != "test.log"]
    assert len(rotated) == 1
    assert rotated[0].name.startswith("test.")
    assert rotated[0].name.endswith(".log")


def test_close_is_idempotent_and_blocks_writes(tmp_path):
    writer = RotatingFileWriter(_config(tmp_path / "test.log"))
    writer.close()
    writer.close()
    with pytest.raises(ValueError):
        writer.write(b"late")


def _broken_writer(tmp_path, strategy, calls):
    logdir = tmp_path / "logs"
    writer = RotatingFileWriter(_config(logdir / "app.log", max_size=1), strategy, calls.append)
    writer.write(b"first")
    writer.flush()
    shutil.rmtree(logdir)
    return writer, logdir


def test_fallback_to_console_on_failure(tmp_path, capsys):
    calls = []
    writer, _ = _broken_writer(tmp_path, RecoveryStrategy.FALLBACK_TO_CONSOLE, calls)
    assert writer.write(b"second") == 6
    assert writer.is_in_fallback_mode() is True
    assert len(calls) == 1
    assert isinstance(calls[0], FileNotFoundError)
    err = capsys.readouterr().err
    assert "falling back to stderr" in err
    assert "second" in err
    writer.write(b"third")
    assert "third" in capsys.readouterr().err
    writer.close()


def test_cleanup_and_retry_falls_back_when_cleanup_fails(tmp_path, capsys):
    calls = []
    writer, _ = _broken_writer(tmp_path, RecoveryStrategy.CLEANUP_AND_RETRY, calls)
    assert writer.write(b"second") == 6
    assert writer.is_in_fallback_mode() is True
    assert len(calls) == 1
    err = capsys.readouterr().err
    assert "after cleanup attempt" in err
    assert "second" in err
    writer.close()


def test_silent_drop_reports_success(tmp_path, capsys):
    calls = []
    writer, _ = _broken_writer(tmp_path, RecoveryStrategy.SILENT_DROP, calls)
    assert writer.write(b"second") == 6
    assert writer.is_in_fallback_mode() is False
    assert len(calls) == 1
    assert "second" not in capsys.readouterr().err
    writer.close()


def test_try_recover_reopens_file(tmp_path):
    calls = []
    writer, logdir = _broken_writer(tmp_path, RecoveryStrategy.FALLBACK_TO_CONSOLE, calls)
    writer.write(b"second")
    assert writer.is_in_fallback_mode() is True
    logdir.mkdir()
    assert writer.try_recover() is True
    assert writer.is_in_fallback_mode() is False
    writer.write(b"again")
    writer.flush()
    assert (logdir / "app.log").read_bytes() == b"again"
    writer.close()


def test_try_recover_without_fallback_returns_false(tmp_path):
    with RotatingFileWriter(_config(tmp_path / "test.log")) as writer:
        assert writer.try_recover() is False