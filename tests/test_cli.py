"""CLI 모듈 테스트"""

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitability.core.config import AppConfig
from profitability.cli.commands import (
    CLI,
    CLIConfig,
    EXIT_CLIENT_FAULT,
    EXIT_CONFIG_FAULT,
    EXIT_OK,
    create_parser,
    main,
)

from conftest import scenario_data


BOOKS_ARGS = [
    "calc",
    "--category", "Books",
    "--size", "Standard",
    "--location", "Local",
    "--mode", "Easy Ship",
    "--service-level", "Standard",
    "--price", "500",
    "--weight", "0.3",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PROFITABILITY_CATALOG_PATH", "PROFITABILITY_STRICT_CATALOG", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "rates.json"
    path.write_text(json.dumps(scenario_data()), encoding="utf-8")
    return path


class TestCLIConfig:
    """CLIConfig 테스트"""

    def test_default_config(self):
        config = CLIConfig()
        assert config.verbose == False
        assert config.no_color == False
        assert config.catalog_path is None

    def test_verbose_sets_debug(self):
        cli = CLI(CLIConfig(verbose=True), AppConfig(log_level="WARNING"))
        assert cli.log_level == logging.DEBUG

    def test_log_level_from_app_config(self):
        cli = CLI(CLIConfig(), AppConfig(log_level="WARNING"))
        assert cli.log_level == logging.WARNING

    def test_verbose_flag_reaches_logger(self, capsys):
        assert main(["-v", "categories"]) == EXIT_OK
        assert logging.getLogger("profitability").level == logging.DEBUG

    def test_catalog_override(self, scenario_file):
        cli = CLI(CLIConfig(catalog_path=scenario_file))
        assert cli.load_catalog().version == "test-1"


class TestParser:
    """파서 테스트"""

    def test_calc_defaults(self):
        args = create_parser().parse_args(["calc", "--category", "Books", "--price", "1", "--weight", "1"])
        assert args.command == "calc"
        assert args.size == "Standard"
        assert args.location == "Local"
        assert args.mode == "Easy Ship"
        assert args.service_level == "Standard"
        assert args.json is False

    def test_calc_requires_price(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["calc", "--category", "Books", "--weight", "1"])

    def test_no_command(self, capsys):
        assert main([]) == EXIT_OK


class TestCalcCommand:
    """calc 커맨드"""

    def test_default_catalog_json(self, capsys):
        code = main(BOOKS_ARGS + ["--json"])
        assert code == EXIT_OK

        body = json.loads(capsys.readouterr().out)
        assert body["referralFee"] == 45.0
        assert body["totalFees"] == 118.0
        assert body["netEarnings"] == 382.0

    def test_scenario_catalog_table(self, scenario_file, capsys):
        code = main(["--no-color", "--catalog", str(scenario_file)] + BOOKS_ARGS)
        assert code == EXIT_OK

        out = capsys.readouterr().out
        assert "80.00" in out
        assert "420.00" in out

    def test_client_fault_exit_code(self, capsys):
        args = [a if a != "Books" else "Furniture" for a in BOOKS_ARGS]
        assert main(args) == EXIT_CLIENT_FAULT

    def test_error_json(self, capsys):
        args = BOOKS_ARGS[:-1] + ["-1", "--json"]
        assert main(args) == EXIT_CLIENT_FAULT
        body = json.loads(capsys.readouterr().out)
        assert body["error"]["kind"] == "client"
        assert body["error"]["details"]["field"] == "weight"

    def test_configuration_fault_exit_code(self, capsys):
        """기본 요율표에는 IXD / Easy Ship 무게 구간이 없음"""
        args = [a if a != "Local" else "IXD" for a in BOOKS_ARGS]
        assert main(args) == EXIT_CONFIG_FAULT

    def test_broken_catalog_refuses(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{}", encoding="utf-8")
        assert main(["--catalog", str(path)] + BOOKS_ARGS) == EXIT_CONFIG_FAULT


class TestCatalogCommands:
    """categories / check-catalog 커맨드"""

    def test_categories(self, capsys):
        assert main(["categories"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Books" in out
        assert "Baby - Diapers" in out

    def test_check_catalog_reports_gaps(self, scenario_file, capsys):
        assert main(["check-catalog", str(scenario_file)]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Regional / Easy Ship" in out

    def test_check_catalog_strict(self, scenario_file, capsys):
        assert main(["check-catalog", str(scenario_file), "--strict"]) == EXIT_CONFIG_FAULT

    def test_check_catalog_invalid(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{ nope", encoding="utf-8")
        assert main(["check-catalog", str(path)]) == EXIT_CONFIG_FAULT
