import textwrap

import pytest

from config import load_config, parse_config, substitute_env_vars
from config.structs import AppConfig
from exchanges.structs import ExchangeEnum, MarketType, TransportType
from infrastructure.exceptions.system import ConfigurationError


CONFIG_YAML = textwrap.dedent("""
    environment: ${SPREAD_ENV:dev}
    universe:
      symbols: [BTC, ETH]
    rates:
      default_usd_krw: ${USD_KRW:1380}
    reconnect:
      delay: 3
      max_attempts: 5
    price_store:
      blocked_symbols: [BEAM, GAS]
      excluded_by_exchange:
        mexc: [TON]
    exchanges:
      - exchange: upbit
      - exchange: binance
        market_type: futures
      - exchange: mexc
        transport: rest_polling
        poll_interval: 5
      - exchange: bybit
        market_type: perpetual
        enabled: false
        reconnect:
          delay: 10
          max_attempts: 2
""")


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


class TestSubstitution:

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("SPREAD_TEST_VAR", raising=False)
        assert substitute_env_vars("a: ${SPREAD_TEST_VAR:fallback}") == "a: fallback"

    def test_environment_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("SPREAD_TEST_VAR", "real")
        assert substitute_env_vars("a: ${SPREAD_TEST_VAR:fallback}") == "a: real"

    def test_missing_without_default_is_empty(self, monkeypatch):
        monkeypatch.delenv("SPREAD_TEST_VAR", raising=False)
        assert substitute_env_vars("a: '${SPREAD_TEST_VAR}'") == "a: ''"


class TestLoadConfig:

    def test_full_file(self, config_file, monkeypatch):
        monkeypatch.setenv("USD_KRW", "1400")
        monkeypatch.delenv("SPREAD_ENV", raising=False)

        config = load_config(config_file, env_file=False)

        assert config.environment == "dev"
        assert config.rates.default_usd_krw == 1400.0
        assert config.universe.symbols == ["BTC", "ETH"]
        assert config.price_store.excluded_by_exchange == {"mexc": ["TON"]}

        sources = config.exchanges
        assert [s.exchange for s in sources] == [
            ExchangeEnum.UPBIT, ExchangeEnum.BINANCE, ExchangeEnum.MEXC, ExchangeEnum.BYBIT
        ]
        assert sources[1].market_type == MarketType.FUTURES
        assert sources[2].transport == TransportType.REST_POLLING
        assert sources[2].poll_interval == 5.0
        assert sources[3].reconnect.max_attempts == 2

        assert [s.exchange for s in config.enabled_sources()] == [
            ExchangeEnum.UPBIT, ExchangeEnum.BINANCE, ExchangeEnum.MEXC
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "absent.yaml", env_file=False)
        assert exc_info.value.setting_name == "path"

    def test_broken_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("exchanges: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path, env_file=False)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = load_config(path, env_file=False)
        assert config == AppConfig()

    def test_repository_config_is_valid(self):
        config = load_config(env_file=False)
        assert config.enabled_sources()


class TestParseConfig:

    def test_defaults(self):
        config = parse_config({})
        assert config.reconnect.delay == 3.0
        assert config.reconnect.max_attempts == 5
        assert config.gap_history.max_size == 10000
        assert config.price_store.outlier_threshold == 5.0
        assert config.price_store.blocked_symbols == ["BEAM", "GAS"]
        assert config.rates.default_usd_krw == 1380.0

    @pytest.mark.parametrize("data", [
        {"exchanges": [{"exchange": "nasdaq"}]},
        {"exchanges": [{"exchange": "upbit", "transport": "carrier_pigeon"}]},
        {"reconnect": {"max_attempts": "many"}},
    ])
    def test_undecodable_values(self, data):
        with pytest.raises(ConfigurationError):
            parse_config(data)

    def test_decode_error_names_setting(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"reconnect": {"max_attempts": "many"}})
        assert exc_info.value.setting_name == "reconnect.max_attempts"
        assert "(setting: reconnect.max_attempts)" in str(exc_info.value)

    @pytest.mark.parametrize("data", [
        {"reconnect": {"delay": -1}},
        {"gap_history": {"max_size": 0}},
        {"price_store": {"outlier_threshold": 0}},
        {"exchanges": [{"exchange": "okx", "batch_size": 0}]},
        {"logging": {"environment": "nowhere"}},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigurationError):
            parse_config(data)
