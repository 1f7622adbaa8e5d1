"""Tests for view serialization and the Flask matrix routes."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from core.matrix import build_matrix
from core.patterns import pattern_cards
from ui.api import RequestError, build_matrix_view, parse_drop_target, parse_int, require_index, serialize_matrix
from ui.app import create_app


class TestSerialization:
    def test_payload_shape(self, infy_snapshots):
        matrix = build_matrix(infy_snapshots)
        payload = serialize_matrix(build_matrix_view("INFY", matrix, pattern_cards(infy_snapshots)))

        assert payload["symbol"] == "INFY"
        assert payload["snapshot_count"] == 3
        assert payload["section_order"] == matrix.section_order

        price_volume = payload["sections"][0]
        assert price_volume["row_order"] == ["price", "volume"]
        assert price_volume["collapsed"] is False

        price = price_volume["rows"][0]
        assert price["expanded"] is True
        assert [cell["color_class"] for cell in price["cells"]] == ["increase", "increase", "flat"]
        assert [cell["css_class"] for cell in price["cells"]] == ["bg-green-50", "bg-green-50", "bg-gray-50"]
        assert price["cells"][0] == {
            "date": "2025-03-05",
            "value": 1534.9,
            "formatted_value": "1534.90",
            "color_class": "increase",
            "css_class": "bg-green-50",
        }

        volume = price_volume["rows"][1]
        assert volume["cells"][0]["formatted_value"] == "7,004,100"

    def test_missing_values_render_na(self, infy_snapshots):
        payload = serialize_matrix(build_matrix_view("INFY", build_matrix(infy_snapshots)))
        macd = next(section for section in payload["sections"] if section["id"] == "macd")
        histogram = next(row for row in macd["rows"] if row["id"] == "histogram")
        assert [cell["formatted_value"] for cell in histogram["cells"]] == ["N/A", "N/A", "-3.30"]
        assert [cell["value"] for cell in histogram["cells"]] == [None, None, -3.3]

    def test_payload_follows_current_order(self, infy_snapshots):
        matrix = build_matrix(infy_snapshots)
        matrix.move_section(5, 0)
        matrix.move_row("macd", 2, 0)
        payload = serialize_matrix(build_matrix_view("INFY", matrix))
        assert payload["sections"][0]["id"] == "price-trends"
        macd = next(section for section in payload["sections"] if section["id"] == "macd")
        assert [row["id"] for row in macd["rows"]] == ["histogram", "macd-line", "signal-line"]

    def test_payload_is_json_serializable(self, infy_snapshots):
        payload = serialize_matrix(build_matrix_view("INFY", build_matrix(infy_snapshots), pattern_cards(infy_snapshots)))
        assert json.loads(json.dumps(payload)) == payload

    def test_empty_matrix(self):
        payload = serialize_matrix(build_matrix_view("NONE", build_matrix([])))
        assert payload["sections"] == []
        assert payload["section_order"] == []


class TestRequestParsing:
    def test_parse_int_bounds(self):
        assert parse_int(None, 60, 2, 500) == 60
        assert parse_int("abc", 60, 2, 500) == 60
        assert parse_int("1000", 60, 2, 500) == 500
        assert parse_int("1", 60, 2, 500) == 2

    def test_require_index(self):
        assert require_index({"index": 3}, "index") == 3
        assert require_index({"index": "4"}, "index") == 4
        for bad in ({}, {"index": True}, {"index": "x"}, {"index": 1.5}):
            with pytest.raises(RequestError):
                require_index(bad, "index")

    def test_parse_drop_target(self):
        target = parse_drop_target({"kind": "section", "index": 1, "section_id": "macd"})
        assert target.kind == "section"
        assert target.section_id is None
        with pytest.raises(RequestError):
            parse_drop_target({"kind": "cell", "index": 1})


@pytest.fixture
def client(snapshot_dir, tmp_path):
    app = create_app(data_dir=snapshot_dir, logs_dir=tmp_path / "logs")
    app.config["TESTING"] = True
    return app.test_client()


class TestRoutes:
    def test_symbols(self, client):
        assert client.get("/api/symbols").get_json() == {"symbols": ["INFY"], "count": 1}

    def test_matrix(self, client):
        response = client.get("/api/matrix/infy")
        assert response.status_code == 200
        body = response.get_json()
        assert body["symbol"] == "INFY"
        assert body["section_order"][0] == "price-volume"
        assert body["patterns"][0]["date"] == "2025-03-05"

    def test_unknown_and_invalid_symbol(self, client):
        assert client.get("/api/matrix/TCS").status_code == 404
        assert client.get("/api/matrix/..%2F..").status_code == 404

    def test_unreadable_snapshots(self, client, snapshot_dir):
        (snapshot_dir / "BAD.json").write_text("{", encoding="utf-8")
        response = client.get("/api/matrix/BAD")
        assert response.status_code == 422
        assert "error" in response.get_json()

    def test_move_section_persists_across_requests(self, client):
        response = client.post("/api/matrix/INFY/sections/move", json={"from_index": 2, "to_index": 0})
        assert response.get_json()["applied"] is True
        assert client.get("/api/matrix/INFY").get_json()["section_order"][0] == "rsi"

    def test_move_row(self, client):
        response = client.post(
            "/api/matrix/INFY/rows/move",
            json={"section_id": "macd", "from_index": 0, "to_index": 2},
        )
        body = response.get_json()
        assert body["applied"] is True
        assert body["layout"]["row_order"]["macd"] == ["signal-line", "histogram", "macd-line"]

    def test_invalid_move_is_noop_not_error(self, client):
        response = client.post(
            "/api/matrix/INFY/rows/move",
            json={"section_id": "keltner", "from_index": 0, "to_index": 1},
        )
        assert response.status_code == 200
        assert response.get_json()["applied"] is False

    def test_malformed_body(self, client):
        assert client.post("/api/matrix/INFY/sections/move", json={"from_index": "a", "to_index": 0}).status_code == 400
        assert client.post("/api/matrix/INFY/sections/move", data="nope").status_code == 400

    def test_toggles(self, client):
        body = client.post("/api/matrix/INFY/sections/rsi/toggle").get_json()
        assert body["layout"]["collapsed"]["rsi"] is True
        body = client.post("/api/matrix/INFY/rows/volume/toggle").get_json()
        assert body["layout"]["expanded"]["volume"] is True
        body = client.post("/api/matrix/INFY/collapse-all").get_json()
        assert all(body["layout"]["collapsed"].values())
        body = client.post("/api/matrix/INFY/expand-all").get_json()
        assert not any(body["layout"]["collapsed"].values())

    def test_drag_gesture(self, client):
        start = client.post("/api/matrix/INFY/drag/start", json={"kind": "row", "index": 0, "section_id": "macd"})
        assert start.get_json()["armed"] is True
        assert start.get_json()["payload"] == {"type": "row", "id": "macd-line", "index": 0, "sectionId": "macd"}

        hover = client.post("/api/matrix/INFY/drag/hover", json={"index": 1}).get_json()
        assert hover == {"accepted": True, "state": "ARMED", "hover_index": 1}

        drop = client.post("/api/matrix/INFY/drag/drop", json={"kind": "row", "index": 1, "section_id": "macd"})
        assert drop.get_json()["applied"] is True
        assert drop.get_json()["layout"]["row_order"]["macd"] == ["signal-line", "macd-line", "histogram"]

    def test_cross_section_drop_rejected(self, client):
        client.post("/api/matrix/INFY/drag/start", json={"kind": "row", "index": 0, "section_id": "macd"})
        drop = client.post("/api/matrix/INFY/drag/drop", json={"kind": "row", "index": 0, "section_id": "rsi"})
        assert drop.get_json()["applied"] is False
        assert drop.get_json()["layout"]["row_order"]["macd"] == ["macd-line", "signal-line", "histogram"]

    def test_drop_with_carried_payload(self, client):
        payload = {"type": "section", "id": "macd", "index": 3, "sectionId": None}
        drop = client.post("/api/matrix/INFY/drag/drop", json={"kind": "section", "index": 0, "payload": payload})
        assert drop.get_json()["applied"] is True
        assert drop.get_json()["layout"]["section_order"][0] == "macd"

    def test_drag_end_cancels(self, client):
        client.post("/api/matrix/INFY/drag/start", json={"kind": "section", "index": 0})
        client.post("/api/matrix/INFY/drag/end")
        drop = client.post("/api/matrix/INFY/drag/drop", json={"kind": "section", "index": 3})
        assert drop.get_json()["applied"] is False

    def test_row_chart(self, client):
        response = client.get("/api/matrix/INFY/rows/price/chart?points=10")
        assert response.status_code == 200
        assert "<div" in response.get_json()["chart_html"]
        assert client.get("/api/matrix/INFY/rows/k-line/chart").status_code == 404

    def test_snapshot_change_resets_order(self, client, snapshot_dir):
        client.post("/api/matrix/INFY/sections/move", json={"from_index": 2, "to_index": 0})
        document = json.loads((snapshot_dir / "INFY.json").read_text(encoding="utf-8"))
        document["data"].append({"date": "2025-03-06", "technical_indicators_snapshot": {"price": 1540.0}})
        (snapshot_dir / "INFY.json").write_text(json.dumps(document), encoding="utf-8")

        body = client.get("/api/matrix/INFY").get_json()
        assert body["snapshot_count"] == 4
        assert body["section_order"][0] == "price-volume"

    def test_recomputed_values_for_existing_date_are_served(self, client, snapshot_dir):
        first = client.get("/api/matrix/INFY").get_json()
        assert first["sections"][0]["rows"][0]["cells"][0]["value"] == 1534.9

        document = json.loads((snapshot_dir / "INFY.json").read_text(encoding="utf-8"))
        for record in document["data"]:
            if record["date"] == "2025-03-05":
                record["technical_indicators_snapshot"]["price"] = 9999.0
        (snapshot_dir / "INFY.json").write_text(json.dumps(document), encoding="utf-8")

        body = client.get("/api/matrix/INFY").get_json()
        assert body["snapshot_count"] == 3
        price = body["sections"][0]["rows"][0]
        assert price["cells"][0]["value"] == 9999.0
        assert price["cells"][0]["formatted_value"] == "9999.00"
