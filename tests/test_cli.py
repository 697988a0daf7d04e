"""Tests for the ootw-decode command line."""

import json
import logging
from pathlib import Path

import pytest

from ootw_decoder import __version__
from ootw_decoder.cli import build_parser, main
from ootw_decoder.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger("ootw_decoder")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["title.bin"])
        assert args.input == Path("title.bin")
        assert args.output_dir is None
        assert not args.info
        assert not args.full_only and not args.logical_only

    def test_no_arguments(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_exclusive_flags(self, sample_file: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main([str(sample_file), "--full-only", "--logical-only"])
        assert exc.value.code == 2

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestConvert:
    def test_writes_both(self, sample_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(sample_file)]) == 0

        full = sample_file.with_name("title-full.png")
        logical = sample_file.with_name("title-logical.png")
        assert full.exists() and logical.exists()
        assert capsys.readouterr().out.splitlines() == [str(full), str(logical)]

    def test_output_dir(self, sample_file: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "png"
        assert main([str(sample_file), "--output-dir", str(out_dir)]) == 0
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "title-full.png",
            "title-logical.png",
        ]

    def test_full_only(self, sample_file: Path) -> None:
        assert main([str(sample_file), "--full-only"]) == 0
        assert sample_file.with_name("title-full.png").exists()
        assert not sample_file.with_name("title-logical.png").exists()

    def test_logical_only(self, sample_file: Path) -> None:
        assert main([str(sample_file), "--logical-only"]) == 0
        assert not sample_file.with_name("title-full.png").exists()
        assert sample_file.with_name("title-logical.png").exists()

    def test_config_suffix(self, sample_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "cfg.toml"
        config.write_text('[output]\nlogical_suffix = "_visible"\n')

        assert main([str(sample_file), "--config", str(config)]) == 0
        assert sample_file.with_name("title_visible.png").exists()

    def test_missing_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        assert main([str(tmp_path / "nope.bin")]) == 1
        assert "File not found" in caplog.text

    def test_missing_config(self, sample_file: Path, tmp_path: Path) -> None:
        assert main([str(sample_file), "--config", str(tmp_path / "none.toml")]) == 1

    def test_truncated_file(
        self, tmp_path: Path, sample_bytes: bytes, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "short.bin"
        path.write_bytes(sample_bytes[:8])

        assert main([str(path)]) == 1
        assert "Cannot decode" in caplog.text
        assert not (tmp_path / "short-full.png").exists()

    def test_output_dir_is_file(
        self, sample_file: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        blocker = tmp_path / "taken"
        blocker.write_text("not a directory")

        assert main([str(sample_file), "--output-dir", str(blocker)]) == 1
        assert "I/O error" in caplog.text

    def test_unwritable_log_file(
        self, sample_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log_file = tmp_path / "missing" / "run.log"

        assert main([str(sample_file), "--log-file", str(log_file)]) == 1
        assert "cannot open log file" in capsys.readouterr().err
        assert not sample_file.with_name("title-full.png").exists()


class TestInfo:
    def test_prints_json(self, sample_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(sample_file), "--info"]) == 0

        info = json.loads(capsys.readouterr().out)
        assert info["width"] == 32
        assert info["height"] == 16
        assert info["tag"] == 0xDEADBEEF
        assert not sample_file.with_name("title-full.png").exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "nope.bin"), "--info"]) == 1


class TestSetupLogging:
    def test_no_handler_stacking(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("ootw_decoder").handlers) == 1

    def test_level(self) -> None:
        setup_logging(level=logging.DEBUG)
        assert logging.getLogger("ootw_decoder").level == logging.DEBUG

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "run.log"
        setup_logging(log_file=str(log_file))

        logging.getLogger("ootw_decoder.test").info("hello from test")
        for handler in logging.getLogger("ootw_decoder").handlers:
            handler.flush()

        assert "hello from test" in log_file.read_text(encoding="utf-8")
