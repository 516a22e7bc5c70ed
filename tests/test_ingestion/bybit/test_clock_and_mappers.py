"""Tests for clock synchronization, timeframe/status mapping and field helpers."""

import pytest

from bybit_connector.ingestion.adapters.bybit_plugin.clock import ClockSynchronizer
from bybit_connector.ingestion.adapters.bybit_plugin.exceptions import (
    BadRequestError,
    TransportError,
)
from bybit_connector.ingestion.adapters.bybit_plugin.fields import (
    iso8601,
    parse8601,
    safe_currency_code,
    safe_float,
    safe_integer,
    safe_string_lower,
    safe_timestamp,
)
from bybit_connector.ingestion.adapters.bybit_plugin.mappers import (
    BYBIT_INTERVAL_MAP,
    get_bybit_interval,
    parse_order_status,
    parse_timeframe,
    parse_transaction_status,
)


class TestClockSynchronizer:
    def test_default_offset_is_zero(self):
        clock = ClockSynchronizer(clock=lambda: 1_000_000)

        assert clock.current_offset_millis() == 0
        assert clock.nonce() == 1_000_000

    def test_configured_offset_applies_without_resync(self):
        clock = ClockSynchronizer(offset=250, clock=lambda: 1_000_000)

        assert clock.nonce() == 999_750

    @pytest.mark.asyncio
    async def test_resync_stores_local_minus_server(self):
        clock = ClockSynchronizer(clock=lambda: 1_000_500)

        async def fetch_server_time():
            return 1_000_000

        offset = await clock.resync(fetch_server_time)

        assert offset == 500
        assert clock.current_offset_millis() == 500
        assert clock.nonce() == 1_000_000

    @pytest.mark.asyncio
    async def test_resync_failure_keeps_previous_offset(self):
        clock = ClockSynchronizer(offset=42, clock=lambda: 0)

        async def fetch_server_time():
            raise TransportError("bybit GET /v2/public/time failed")

        with pytest.raises(TransportError):
            await clock.resync(fetch_server_time)
        assert clock.current_offset_millis() == 42


class TestTimeframes:
    @pytest.mark.parametrize(
        "timeframe,interval",
        [("1m", "1"), ("1h", "60"), ("12h", "720"), ("1d", "D"), ("1M", "M"), ("1y", "Y")],
    )
    def test_interval_tokens(self, timeframe, interval):
        assert get_bybit_interval(timeframe) == interval

    def test_every_mapped_timeframe_has_a_duration(self):
        for timeframe in BYBIT_INTERVAL_MAP:
            assert parse_timeframe(timeframe) > 0

    @pytest.mark.parametrize(
        "timeframe,seconds",
        [("1m", 60), ("15m", 900), ("2h", 7200), ("1d", 86400), ("1w", 604800)],
    )
    def test_parse_timeframe(self, timeframe, seconds):
        assert parse_timeframe(timeframe) == seconds

    @pytest.mark.parametrize("timeframe", ["4h", "2m", "", "xm"])
    def test_unsupported_interval(self, timeframe):
        with pytest.raises(BadRequestError):
            get_bybit_interval(timeframe)

    def test_unparseable_timeframe(self):
        with pytest.raises(BadRequestError):
            parse_timeframe("1q")


class TestStatusMaps:
    def test_order_status_unknown_passes_through(self):
        assert parse_order_status("filled") == "closed"
        assert parse_order_status("PartiallyFilled") == "PartiallyFilled"
        assert parse_order_status(None) is None

    def test_transaction_status(self):
        assert parse_transaction_status("completed") == "ok"
        assert parse_transaction_status("unconfirmed") == "pending"
        assert parse_transaction_status("failed") == "failed"


class TestFields:
    @pytest.mark.parametrize(
        "value,expected",
        [("1.5", 1.5), (2, 2.0), ("", None), ("abc", None), (None, None), (True, None), ("nan", None)],
    )
    def test_safe_float(self, value, expected):
        assert safe_float({"k": value}, "k") == expected

    def test_zero_is_a_value(self):
        assert safe_float({"k": "0"}, "k") == 0.0
        assert safe_integer({"k": 0}, "k") == 0

    def test_safe_float_on_non_dict(self):
        assert safe_float(None, "k") is None
        assert safe_float([1, 2], "k", 3.0) == 3.0

    def test_safe_timestamp_fractional_seconds(self):
        assert safe_timestamp({"time_now": "1583933682.448826"}, "time_now") == 1583933682448

    def test_safe_string_lower(self):
        assert safe_string_lower({"side": "Sell"}, "side") == "sell"
        assert safe_string_lower({}, "side") is None

    def test_iso8601_round_trip(self):
        assert iso8601(1583954310123) == "2020-03-11T19:18:30.123Z"
        assert parse8601("2020-03-11T19:18:30.123Z") == 1583954310123
        assert iso8601(None) is None
        assert parse8601("not a date") is None

    def test_safe_currency_code(self):
        assert safe_currency_code("xbt") == "BTC"
        assert safe_currency_code("eth") == "ETH"
        assert safe_currency_code(None) is None
