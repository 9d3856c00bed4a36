"""Tests for the Flask front end."""

import pytest

from app import app, parse_form
from formatting import fmt
from comparison import ValidationFailure, compare


@pytest.fixture
def report_path(tmp_path):
    return tmp_path / "report.pdf"


@pytest.fixture
def client(report_path):
    app.config.update(TESTING=True, REPORT_PATH=str(report_path))
    with app.test_client() as c:
        yield c


def _form(**overrides):
    form = {
        "loan_lakhs": "45",
        "interest_rate": "9",
        "tenure_a": "5",
        "tenure_b": "10",
        "expected_growth": "12",
    }
    form.update(overrides)
    return form


def test_get_shows_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    page = resp.get_data(as_text=True)
    assert 'name="loan_lakhs"' in page
    assert "Strategic Financial Recommendation" not in page


def test_post_renders_analysis_and_pdf(client, report_path):
    resp = client.post("/", data=_form())
    assert resp.status_code == 200
    page = resp.get_data(as_text=True)
    assert "Strategic Financial Recommendation" in page
    assert "Expected Return: 12% (Your Expectation)" in page
    assert fmt(compare(4_500_000, 9, 5, 10, 12).shorter_loan.periodic_payment) in page
    assert page.count("data:image/png;base64,") == 3
    assert report_path.exists()

    dl = client.get("/download-pdf")
    assert dl.status_code == 200
    assert dl.data.startswith(b"%PDF")


def test_invalid_input_is_rejected(client, report_path):
    resp = client.post("/", data=_form(loan_lakhs="lots"))
    assert resp.status_code == 400
    assert "Loan amount must be a number" in resp.get_data(as_text=True)
    assert not report_path.exists()


def test_negative_growth_is_rejected(client):
    resp = client.post("/", data=_form(expected_growth="-2"))
    assert resp.status_code == 400
    assert "cannot be negative" in resp.get_data(as_text=True)


def test_equal_tenures_show_warning(client, report_path):
    client.post("/", data=_form())
    assert report_path.exists()

    resp = client.post("/", data=_form(tenure_a="7", tenure_b="7"))
    assert resp.status_code == 200
    page = resp.get_data(as_text=True)
    assert "no EMI difference to invest" in page
    assert "Strategic Financial Recommendation" not in page
    assert not report_path.exists()


def test_download_without_report(client):
    assert client.get("/download-pdf").status_code == 404


def test_parse_form_converts_lakhs():
    inputs = parse_form(_form(loan_lakhs="₹12.5", interest_rate="8.25%"))
    assert inputs.loan_amount == 1_250_000
    assert inputs.annual_rate_pct == 8.25
    assert inputs.tenure_a_years == 5


def test_parse_form_names_field():
    with pytest.raises(ValidationFailure) as excinfo:
        parse_form(_form(tenure_b=""))
    assert excinfo.value.field == "tenure_b_years"


def test_extreme_inputs_render(client, report_path):
    resp = client.post("/", data=_form(tenure_b="1100", expected_growth="100"))
    assert resp.status_code == 200
    page = resp.get_data(as_text=True)
    assert "Strategic Financial Recommendation" in page
    assert "N/A (check inputs)" in page
    assert report_path.exists()


def test_too_long_tenure_is_rejected(client):
    resp = client.post("/", data=_form(tenure_b="1e308"))
    assert resp.status_code == 400
    assert "tenure_b_years is too large" in resp.get_data(as_text=True)
