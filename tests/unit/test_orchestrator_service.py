"""Unit tests for functions defined in src/orchestrator_service.py."""

import os

import pytest
from pytest_mock import MockerFixture

import constants
from configuration import configuration
from orchestrator_service import create_argument_parser, main

CONFIG_FILE = "tests/configuration/ai-orchestrator.yaml"


@pytest.fixture(name="keep_configuration")
def keep_configuration_fixture():
    """Restore configuration shared by other unit tests."""
    # pylint: disable=protected-access
    original = configuration._configuration
    yield
    configuration._configuration = original


def test_create_argument_parser() -> None:
    """Test for create_argument_parser function."""
    arg_parser = create_argument_parser()
    args = arg_parser.parse_args([])
    assert args.verbose is False
    assert args.dump_configuration is False
    assert args.config_file == constants.DEFAULT_CONFIGURATION_FILE

    args = arg_parser.parse_args(["-v", "-d", "-c", "foo.yaml"])
    assert args.verbose is True
    assert args.dump_configuration is True
    assert args.config_file == "foo.yaml"


@pytest.mark.usefixtures("keep_configuration")
def test_main_starts_service(mocker: MockerFixture, monkeypatch) -> None:
    """Test that service is started with loaded configuration."""
    monkeypatch.setattr("sys.argv", ["orchestrator_service.py", "-c", CONFIG_FILE])
    monkeypatch.delenv(constants.CONFIGURATION_PATH_ENV, raising=False)
    mock_start = mocker.patch("orchestrator_service.start_uvicorn")

    main()

    mock_start.assert_called_once_with(configuration.service_configuration)
    assert os.environ[constants.CONFIGURATION_PATH_ENV] == CONFIG_FILE
    assert configuration.configuration.name == "foo bar baz"


@pytest.mark.usefixtures("keep_configuration")
def test_main_dump_configuration(mocker: MockerFixture, monkeypatch, tmp_path) -> None:
    """Test that configuration is dumped without starting the service."""
    config_file = os.path.abspath(CONFIG_FILE)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "sys.argv", ["orchestrator_service.py", "-d", "-c", config_file]
    )
    mock_start = mocker.patch("orchestrator_service.start_uvicorn")

    main()

    mock_start.assert_not_called()
    assert (tmp_path / "configuration.json").exists()
