import json
import logging
from pathlib import Path

from loguru import logger

from spotrates.logging_config import setup_logging


def test_file_sink_writes_json_lines(tmp_path: Path) -> None:
    setup_logging(console_level="ERROR", file_level="DEBUG", log_dir=tmp_path / "logs")

    logger.bind(source="Kraken").info("[Kraken] Rate fetched.")
    logger.remove()  # Closes the file sink.

    log_files = list((tmp_path / "logs").glob("spotrates_*.log"))
    assert len(log_files) == 1
    records = [
        json.loads(line)
        for line in log_files[0].read_text(encoding="utf-8").splitlines()
    ]
    entry = next(r for r in records if r["message"] == "[Kraken] Rate fetched.")
    assert entry["level"] == "INFO"
    assert entry["extra"] == {"source": "Kraken"}
    assert entry["source"]["function"] == "test_file_sink_writes_json_lines"


def test_message_with_braces_is_written_verbatim(tmp_path: Path) -> None:
    setup_logging(console_level="ERROR", log_dir=tmp_path)

    logger.warning("payload was {not: json}")
    logger.remove()

    text = next(tmp_path.glob("spotrates_*.log")).read_text(encoding="utf-8")
    assert any(
        json.loads(line)["message"] == "payload was {not: json}"
        for line in text.splitlines()
    )


def test_no_file_sink_without_directory(tmp_path: Path) -> None:
    setup_logging(console_level="INFO", log_dir=None)
    logger.info("console only")
    assert list(tmp_path.iterdir()) == []


def test_standard_logging_is_routed_to_loguru() -> None:
    setup_logging(console_level="ERROR")
    captured: list[str] = []
    logger.add(lambda message: captured.append(message.record["message"]), level="DEBUG")

    logging.getLogger("httpx").warning("HTTP Request: GET https://example.test")

    assert "HTTP Request: GET https://example.test" in captured
