"""Test API endpoints."""

import csv
import io

import pytest
from fastapi.testclient import TestClient


def _add(client: TestClient, **fields) -> dict:
    payload = {"user_id": "alice", "asset_pair": "BTC/USDT", "result": "win", "amount": "10"}
    payload.update(fields)
    response = client.post("/api/v1/trades/quick", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_root_endpoint(client: TestClient):
    """Test root endpoint returns expected data."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Crypto Trading Journal"
    assert data["status"] == "running"
    assert "version" in data


def test_health_endpoint(client: TestClient):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestTrades:
    """Trade CRUD endpoints."""

    def test_create_advanced_trade(self, client: TestClient):
        """Closed advanced entry gets derived P&L."""
        response = client.post(
            "/api/v1/trades",
            json={
                "user_id": "alice",
                "asset_pair": "ETH/USDT",
                "trade_type": "short",
                "entry_price": "3400",
                "exit_price": "3300",
                "quantity": "0.5",
                "fees": "2",
                "status": "closed",
                "strategy_tag": "Fade",
                "exchange": "Bybit",
                "trade_date": "2026-03-10T12:00:00Z",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert float(data["pnl"]) == 48.0
        assert data["status"] == "closed"
        assert data["user_id"] == "alice"

    def test_create_rejects_negative_price(self, client: TestClient):
        """Validation errors come back as 422."""
        response = client.post(
            "/api/v1/trades",
            json={"user_id": "alice", "asset_pair": "BTC/USDT", "entry_price": "-1", "quantity": "1"},
        )
        assert response.status_code == 422

    def test_quick_add(self, client: TestClient):
        """Quick-add stores a closed long with signed P&L."""
        data = _add(client, result="loss", amount="12.5")

        assert float(data["pnl"]) == -12.5
        assert data["trade_type"] == "long"
        assert data["status"] == "closed"

    def test_get_update_delete(self, client: TestClient):
        """A trade can be fetched, edited and removed."""
        trade = _add(client)

        response = client.get(f"/api/v1/trades/{trade['id']}")
        assert response.status_code == 200
        assert response.json()["asset_pair"] == "BTC/USDT"

        response = client.patch(f"/api/v1/trades/{trade['id']}", json={"strategy_tag": "Scalp"})
        assert response.status_code == 200
        assert response.json()["strategy_tag"] == "Scalp"

        response = client.delete(f"/api/v1/trades/{trade['id']}")
        assert response.status_code == 204

        response = client.get(f"/api/v1/trades/{trade['id']}")
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "body",
        [
            {"status": None},
            {"trade_type": None},
            {"entry_price": None},
            {"quantity": None},
            {"fees": None},
            {"trade_date": None},
            {"asset_pair": None},
            {"asset_pair": ""},
            {"asset_pair": "   "},
        ],
    )
    def test_update_cannot_clear_required_fields(self, client: TestClient, body: dict):
        """Nulling a required column is a validation error and leaves the trade intact."""
        trade = _add(client, amount="15")

        response = client.patch(f"/api/v1/trades/{trade['id']}", json=body)
        assert response.status_code == 422

        unchanged = client.get(f"/api/v1/trades/{trade['id']}").json()
        assert unchanged["asset_pair"] == "BTC/USDT"
        assert unchanged["status"] == "closed"
        assert float(unchanged["pnl"]) == 15.0

    def test_update_can_clear_optional_fields(self, client: TestClient):
        """Optional columns accept null."""
        trade = _add(client, strategy_tag="Scalp", exchange="Kraken")

        response = client.patch(
            f"/api/v1/trades/{trade['id']}",
            json={"strategy_tag": None, "exchange": "", "notes": None, "pnl": None},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["strategy_tag"] is None
        assert data["exchange"] is None
        assert data["pnl"] is None

    def test_missing_trade_is_404(self, client: TestClient):
        """Unknown IDs return 404 for every verb."""
        assert client.get("/api/v1/trades/nope").status_code == 404
        assert client.patch("/api/v1/trades/nope", json={"notes": "x"}).status_code == 404
        assert client.delete("/api/v1/trades/nope").status_code == 404

    def test_list_trades(self, client: TestClient):
        """Listing is scoped to the user and paginated."""
        _add(client, trade_date="2026-03-01T10:00:00Z")
        _add(client, trade_date="2026-03-05T10:00:00Z", asset_pair="ETH/USDT")
        _add(client, user_id="bob")

        response = client.get("/api/v1/trades", params={"user_id": "alice", "limit": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["limit"] == 1
        assert [t["asset_pair"] for t in data["trades"]] == ["ETH/USDT"]


class TestAnalytics:
    """Analytics endpoints (clock pinned to 2026-03-18 15:30 UTC)."""

    def test_monthly_analytics(self, client: TestClient):
        """Only this month's closed trades are aggregated."""
        _add(client, amount="100", strategy_tag="Breakout", exchange="Binance", trade_date="2026-03-02T09:00:00Z")
        _add(client, result="loss", amount="40", exchange="Kraken", trade_date="2026-03-03T09:00:00Z")
        _add(client, amount="60", strategy_tag="Breakout", trade_date="2026-03-04T09:00:00Z")
        _add(client, amount="999", trade_date="2026-02-20T09:00:00Z")

        response = client.get("/api/v1/analytics", params={"user_id": "alice", "period": "monthly"})
        assert response.status_code == 200
        data = response.json()

        summary = data["summary"]
        assert float(summary["total_pnl"]) == 120.0
        assert summary["total_trades"] == 3
        assert summary["win_rate"] == 66.7
        assert summary["profit_factor"] == 2.0
        assert [float(p["cumulative_pnl"]) for p in data["equity_curve"]] == [100.0, 60.0, 120.0]
        assert [s["name"] for s in data["win_loss_distribution"]] == ["Wins", "Losses"]
        assert [e["key"] for e in data["breakdowns"]["strategy"]] == ["Breakout", "No Strategy"]
        assert [e["key"] for e in data["breakdowns"]["exchange"]] == ["Binance", "Kraken", "Unknown"]

    def test_default_period_is_monthly(self, client: TestClient):
        """Without a period the configured default applies."""
        response = client.get("/api/v1/analytics", params={"user_id": "alice"})
        assert response.status_code == 200
        assert response.json()["period"] == "monthly"

    def test_empty_period(self, client: TestClient):
        """No trades gives the no-data sentinel."""
        response = client.get("/api/v1/analytics", params={"user_id": "nobody", "period": "all"})
        data = response.json()

        assert data["summary"]["total_trades"] == 0
        assert data["equity_curve"][0]["label"] == "No data"
        assert data["win_loss_distribution"] == []

    def test_custom_period_missing_end(self, client: TestClient):
        """A half-specified custom range is empty, not an error."""
        _add(client, trade_date="2026-03-02T09:00:00Z")

        response = client.get(
            "/api/v1/analytics",
            params={"user_id": "alice", "period": "custom", "start_date": "2026-03-01"},
        )
        assert response.status_code == 200
        assert response.json()["filtered_trades"] == []

    def test_breakdown(self, client: TestClient):
        """Breakdown endpoint reports best and worst groups."""
        _add(client, amount="5", strategy_tag="Scalp", trade_date="2026-03-02T09:00:00Z")
        _add(client, amount="50", strategy_tag="Breakout", trade_date="2026-03-03T09:00:00Z")
        _add(client, result="loss", amount="30", strategy_tag="Fade", trade_date="2026-03-04T09:00:00Z")

        response = client.get(
            "/api/v1/analytics/breakdown/strategy",
            params={"user_id": "alice", "period": "all"},
        )
        assert response.status_code == 200
        data = response.json()
        assert [e["key"] for e in data["entries"]] == ["Scalp", "Breakout", "Fade"]
        assert data["best"]["key"] == "Breakout"
        assert data["worst"]["key"] == "Fade"

    def test_dashboard_stats(self, client: TestClient):
        """Dashboard figures cover every closed trade."""
        _add(client, amount="30", trade_date="2025-06-01T09:00:00Z")
        _add(client, result="loss", amount="10", trade_date="2026-03-01T09:00:00Z")

        response = client.get("/api/v1/dashboard/stats", params={"user_id": "alice"})
        data = response.json()
        assert data["total_trades"] == 2
        assert data["win_rate"] == 50.0
        assert float(data["total_pnl"]) == 20.0
        assert float(data["avg_profit_per_trade"]) == 10.0


class TestCompute:
    """Stateless analytics over posted trades."""

    def test_compute(self, client: TestClient):
        """Posted trades are analysed against the pinned clock."""
        trades = [
            {"id": "b", "asset_pair": "X", "trade_type": "long", "entry_price": 1, "quantity": 1,
             "pnl": -40, "status": "closed", "trade_date": "2026-01-02T00:00:00Z"},
            {"id": "a", "asset_pair": "X", "trade_type": "long", "entry_price": 1, "quantity": 1,
             "pnl": 100, "status": "closed", "trade_date": "2026-01-01T00:00:00Z"},
        ]
        response = client.post("/api/v1/analytics/compute", json={"trades": trades, "period": "yearly"})

        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data["filtered_trades"]] == ["a", "b"]
        assert float(data["summary"]["total_pnl"]) == 60.0

    def test_compute_bad_date(self, client: TestClient):
        """An unparseable date is a 422 naming the trade."""
        trades = [
            {"id": "bad-1", "asset_pair": "X", "trade_type": "long", "entry_price": 1, "quantity": 1,
             "pnl": 5, "status": "closed", "trade_date": "someday"},
        ]
        response = client.post("/api/v1/analytics/compute", json={"trades": trades})

        assert response.status_code == 422
        assert response.json()["detail"]["trade_id"] == "bad-1"


class TestCalendarAndReports:
    """Calendar and report export endpoints."""

    def test_calendar(self, client: TestClient):
        """Month grid around the pinned date."""
        _add(client, amount="20", trade_date="2026-03-02T09:00:00Z")
        client.post(
            "/api/v1/trades",
            json={"user_id": "alice", "asset_pair": "ETH/USDT", "entry_price": "1", "quantity": "1",
                  "trade_date": "2026-03-02T11:00:00Z"},
        )

        response = client.get("/api/v1/calendar", params={"user_id": "alice"})
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "March 2026"
        day = next(d for d in data["days"] if d["date"] == "2026-03-02")
        assert day["trades_count"] == 2
        assert float(day["total_pnl"]) == 20.0
        assert next(d for d in data["days"] if d["is_today"])["date"] == "2026-03-18"

    def test_week_calendar(self, client: TestClient):
        """Week view with an explicit anchor."""
        response = client.get(
            "/api/v1/calendar",
            params={"user_id": "alice", "view": "week", "anchor": "2026-03-04"},
        )
        data = response.json()
        assert data["range_start"] == "2026-03-01"
        assert data["next_anchor"] == "2026-03-11"
        assert len(data["days"]) == 7

    def test_report_json(self, client: TestClient):
        """Report table for the period."""
        _add(client, amount="1234.5", strategy_tag="Breakout", trade_date="2026-03-02T09:00:00Z")

        response = client.get("/api/v1/reports/trades", params={"user_id": "alice", "period": "monthly"})
        assert response.status_code == 200
        data = response.json()
        assert data["generated_on"] == "2026-03-18"
        assert data["summary_lines"][0] == "Total P&L: $1,234.50"
        assert data["rows"][0][4] == "$1,234.50"

    def test_report_csv(self, client: TestClient):
        """CSV download with a dated file name."""
        _add(client, result="loss", amount="40", trade_date="2026-03-02T09:00:00Z")

        response = client.get("/api/v1/reports/trades.csv", params={"user_id": "alice", "period": "all"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "trading-report-2026-03-18.csv" in response.headers["content-disposition"]

        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0] == ["Asset", "Type", "Entry", "Exit", "P&L", "Strategy", "Date"]
        assert rows[1][4] == "-$40.00"
