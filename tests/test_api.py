"""
Tests for the FastAPI routes.
"""
import pytest
from fastapi.testclient import TestClient

from app import api

CSV_CONTENT = (
    "Value Date,Transaction Remarks,Withdrawal,Deposit,Balance,Who\n"
    "2024-01-01,x,100,0,900,NB\n"
    "2024-01-02,y,0,50,950,NS\n"
    "2024-01-03,rent,\"1,000\",,,C\n"
).encode("utf-8")


@pytest.fixture
def client(tmp_path, monkeypatch):
    storage = tmp_path / "uploads"
    monkeypatch.setattr(api.settings, "temp_storage_path", str(storage))
    return TestClient(api.app)


def upload(content: bytes = CSV_CONTENT, filename: str = "statement.csv"):
    return {"csv_file": (filename, content, "text/csv")}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_favicon(client):
    assert client.get("/favicon.ico").status_code == 204


def test_index_renders_form(client):
    response = client.get("/")
    assert response.status_code == 200
    assert 'name="csv_file"' in response.text
    assert "NB paid to NS" in response.text


def test_api_analyze_returns_result(client):
    response = client.post("/api/analyze", files=upload())
    assert response.status_code == 200
    body = response.json()

    assert body["file"]["rows"] == 3
    assert body["settlement_text"] == "NB owes NS"
    result = body["result"]
    assert len(result["transactions"]) == 3
    assert result["summaries"]["shared"]["count"] == 1
    assert result["latest_transaction"]["remarks"] == "rent"
    assert result["settlement"]["owing_party"] == "party_a"
    assert result["settlement"]["amount"] == "75"


def test_api_analyze_with_prior_balances(client):
    response = client.post(
        "/api/analyze",
        files=upload(),
        data={"prev_balance_a": "", "prev_balance_b": "1,00"},
    )
    assert response.status_code == 200
    settlement = response.json()["result"]["settlement"]
    # 75 owed, 100 already paid: direction reverses
    assert settlement["owing_party"] == "party_b"
    assert settlement["amount"] == "25"


def test_api_analyze_missing_column(client):
    content = b"Date,Description,Withdrawal,Balance,Who\n1/1,x,1,1,NB\n"
    response = client.post("/api/analyze", files=upload(content))
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Required column 'deposit' not found in CSV."


def test_rejects_non_csv(client):
    response = client.post("/api/analyze", files=upload(filename="statement.xlsx"))
    assert response.status_code == 400
    assert response.json()["error"] == "Please upload a valid CSV file."


def test_rejects_oversized_upload(client, monkeypatch):
    monkeypatch.setattr(api.settings, "max_upload_mb", 1)
    content = CSV_CONTENT + b" " * (1024 * 1024)
    response = client.post("/api/analyze", files=upload(content))
    assert response.status_code == 400
    assert "exceeds 1MB" in response.json()["error"]


def test_upload_is_removed_after_analysis(client, tmp_path):
    client.post("/api/analyze", files=upload())
    storage = tmp_path / "uploads"
    assert list(storage.glob("*")) == []


def test_upload_is_removed_after_failure(client, tmp_path):
    client.post("/api/analyze", files=upload(b"Who\nNB\n"))
    storage = tmp_path / "uploads"
    assert list(storage.glob("*")) == []


def test_html_report(client):
    response = client.post("/analyze", files=upload(), data={"prev_balance_a": "10"})
    assert response.status_code == 200
    text = response.text
    assert "File uploaded and processed successfully!" in text
    assert "NB should pay this amount to NS" in text
    assert "₹85.00" in text
    assert 'value="10"' in text


def test_html_report_error(client):
    response = client.post("/analyze", files=upload(b""))
    assert response.status_code == 400
    assert "CSV file is empty or invalid." in response.text


def test_export_returns_workbook(client):
    response = client.post("/api/export", files=upload())
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "attachment" in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"
