"""
Testes para a função setup_logging() do módulo de observabilidade.

setup_logging() configura todo o pipeline de logging; se falhar, nenhum
componente do conector consegue emitir logs estruturados.
"""

import json
import logging
from io import StringIO

import pytest
import structlog

from bybit_connector.infrastructure.observability import setup_logging


@pytest.fixture
def clean_logging():
    """
    Fixture que limpa a configuração de logging entre testes.

    structlog e logging mantêm estado global.
    """
    original_handlers = logging.root.handlers[:]

    logging.root.handlers = []
    logging.root.setLevel(logging.WARNING)
    structlog.reset_defaults()

    yield

    logging.root.handlers = []
    logging.root.setLevel(logging.WARNING)
    structlog.reset_defaults()
    logging.root.handlers = original_handlers


@pytest.fixture
def captured(clean_logging):
    """Handler em memória no root logger; devolve o buffer."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.root.addHandler(handler)
    yield buffer
    logging.root.removeHandler(handler)


def _json_lines(buffer: StringIO) -> list[dict]:
    lines = []
    for line in buffer.getvalue().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            lines.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return lines


class TestSetupLogging:
    """
    Testes para a função setup_logging().

    Opções cobertas:
    1. Modo JSON vs texto
    2. Níveis de log
    3. Timestamps habilitados/desabilitados
    """

    def test_setup_json_mode(self, captured):
        """
        Test 1/6: Modo JSON inclui contexto da aplicação e severidade.
        """
        setup_logging(level="INFO", json_logs=True, include_timestamp=True)
        assert structlog.is_configured()
        logging.root.setLevel(logging.INFO)

        logger = structlog.get_logger("test_json").bind(test="json_mode")
        logger.info("json_test_event", value=123)

        parsed = _json_lines(captured)
        assert parsed, "No valid JSON found"
        entry = parsed[-1]
        assert entry["event"] == "json_test_event"
        assert entry["value"] == 123
        assert entry["app"] == "bybit-connector"
        assert entry["severity"] == "INFO"
        assert "timestamp" in entry

    def test_setup_text_mode(self, captured):
        """
        Test 2/6: Modo texto (console) produz saída não-JSON.
        """
        setup_logging(level="INFO", json_logs=False, include_timestamp=True)
        logging.root.setLevel(logging.INFO)

        structlog.get_logger("test_text").info("text_test_event", value=456)

        output = captured.getvalue().strip()
        assert "text_test_event" in output
        assert not _json_lines(captured)

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    def test_setup_sets_root_level(self, clean_logging, level):
        """
        Test 3/6: O nível do root logger segue o parâmetro level.
        """
        setup_logging(level=level, json_logs=True)
        assert logging.root.level == getattr(logging, level)

    def test_setup_without_timestamp(self, captured):
        """
        Test 4/6: Sem timestamp, a chave não aparece.
        """
        setup_logging(level="INFO", json_logs=True, include_timestamp=False)
        logging.root.setLevel(logging.INFO)

        logger = structlog.get_logger("test_no_ts")
        logger.debug("debug_should_not_appear")
        logger.info("no_timestamp_test", test_value=True)

        parsed = _json_lines(captured)
        events = [entry["event"] for entry in parsed]
        assert events == ["no_timestamp_test"]
        assert "timestamp" not in parsed[0]

    def test_setup_invalid_log_level_falls_back_to_info(self, clean_logging):
        """
        Test 5/6: Nível inválido cai para INFO.
        """
        setup_logging(level="INVALID_LEVEL", json_logs=True)
        assert structlog.is_configured()
        assert logging.root.level == logging.INFO

    def test_setup_applies_level_with_existing_handlers(self, captured):
        """
        Test 6/6: Com handlers já instalados no root, o nível ainda é aplicado.
        """
        assert logging.root.handlers
        setup_logging(level="DEBUG", json_logs=True)

        assert logging.root.level == logging.DEBUG

        structlog.get_logger("test").debug("debug_after_reconfigure")
        events = [entry["event"] for entry in _json_lines(captured)]
        assert events == ["debug_after_reconfigure"]
