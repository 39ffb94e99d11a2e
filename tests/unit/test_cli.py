import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from pytest_mock import MockerFixture

from spotrates import cli
from spotrates.adapters.binance import BinanceAdapter
from spotrates.adapters.kraken import KrakenAdapter
from spotrates.adapters.uphold import UpholdAdapter
from spotrates.config import Settings, SourceSettings

TransportFactory = Callable[[dict[str, Any]], httpx.MockTransport]


def url(adapter_cls: type) -> str:
    return adapter_cls._BASE_API_URL + adapter_cls._TICKER_ENDPOINT


@pytest.fixture(autouse=True)
def no_logging_setup(mocker: MockerFixture) -> Any:
    """Keeps main() from replacing the test session's loguru sinks."""
    return mocker.patch("spotrates.cli.setup_logging")


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text("[fetch]\ntimeout_s = 5\n", encoding="utf-8")
    return path


def test_roster_covers_every_venue_once(mocker: MockerFixture) -> None:
    client = mocker.Mock(spec=httpx.AsyncClient)
    adapters = cli._instantiate_adapters(client, Settings())
    names = [a.display_name for a in adapters]
    assert len(names) == len(set(names)) == 29
    assert names[0] == "Bibox"
    assert names[-1] == "Yobit"


def test_instantiate_adapters_applies_filters(mocker: MockerFixture) -> None:
    client = mocker.Mock(spec=httpx.AsyncClient)
    settings = Settings(sources=SourceSettings(disabled=["Kraken"]))

    adapters = cli._instantiate_adapters(client, settings, ["kraken", "Uphold", "binance"])

    assert [a.display_name for a in adapters] == ["Binance", "Uphold"]


def test_main_prints_ok_and_error_lines(
    config_file: Path,
    mock_transport: TransportFactory,
    load_fixture: Callable[[str], Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    transport = mock_transport(
        {
            url(BinanceAdapter): load_fixture("binance"),
            url(KrakenAdapter): httpx.Response(502, text="bad gateway"),
        }
    )

    exit_code = cli.main(
        ["--config", str(config_file), "--source", "Kraken", "--source", "Binance"],
        transport=transport,
    )

    out, err = capsys.readouterr()
    assert exit_code == 0
    assert out.splitlines() == ["Binance OK", "Kraken ERROR"]
    assert "error: TransportError: HTTP 502" in err


def test_main_exits_nonzero_when_every_source_fails(
    config_file: Path, mock_transport: TransportFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    transport = mock_transport({url(UpholdAdapter): httpx.Response(500)})

    exit_code = cli.main(
        ["--config", str(config_file), "--source", "Uphold", "--sequential"],
        transport=transport,
    )

    assert exit_code == 1
    assert capsys.readouterr().out == "Uphold ERROR\n"


def test_main_json_output(
    config_file: Path,
    mock_transport: TransportFactory,
    load_fixture: Callable[[str], Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    transport = mock_transport({url(UpholdAdapter): load_fixture("uphold")})

    exit_code = cli.main(
        ["--config", str(config_file), "--source", "Uphold", "--json"],
        transport=transport,
    )

    entries = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert exit_code == 0
    assert len(entries) == 1
    assert entries[0]["source"] == "Uphold"
    assert entries[0]["ok"] is True
    assert entries[0]["rate"]["last_price"] == 88.61
    assert entries[0]["rate"]["quote_currency"] == "USD"


def test_main_with_no_matching_source(
    config_file: Path, mock_transport: TransportFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = cli.main(
        ["--config", str(config_file), "--source", "Mt. Gox"],
        transport=mock_transport({}),
    )

    assert exit_code == 1
    assert capsys.readouterr().out == ""


def test_command_line_overrides_config(
    config_file: Path, mocker: MockerFixture, no_logging_setup: Any
) -> None:
    run_checks = mocker.patch(
        "spotrates.cli.run_checks", new=mocker.AsyncMock(return_value=[])
    )

    cli.main(
        [
            "--config",
            str(config_file),
            "--timeout",
            "2.5",
            "--sequential",
            "--log-level",
            "DEBUG",
        ]
    )

    settings = run_checks.call_args.args[0]
    assert settings.fetch.timeout_s == 2.5
    assert settings.fetch.concurrent is False
    assert no_logging_setup.call_args.kwargs["console_level"] == "DEBUG"


def test_non_positive_timeout_is_a_usage_error(config_file: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--config", str(config_file), "--timeout", "0"])
    assert exc_info.value.code == 2
