import json
from pathlib import Path

from typer.testing import CliRunner

from rxcost_core.cli import app
from rxcost_core.domain.models import ProjectionConfig
from rxcost_core.services.projection import project


runner = CliRunner()
DATA = Path(__file__).parent / "data"


def test_cli_project_prints_json():
    result = runner.invoke(app, ["project", "--monthly-cost", "100", "--seed", "3"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    expected = project(100.0, ProjectionConfig(seed=3))
    assert payload["annual_cost"] == expected.annual_cost
    assert payload["monthly_emi"] == expected.monthly_installment
    assert [m["month"] for m in payload["prediction_data"]["monthly_breakdown"]][:3] == ["Jan", "Feb", "Mar"]
    assert payload["affordability_risk"] is False


def test_cli_project_writes_file(tmp_path: Path):
    out = tmp_path / "projection.json"
    result = runner.invoke(app, ["project", "--monthly-cost", "20", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert len(json.loads(out.read_text())["prediction_data"]["monthly_breakdown"]) == 12


def test_cli_project_rejects_negative_cost():
    result = runner.invoke(app, ["project", "--monthly-cost=-1"])
    assert result.exit_code == 2


def test_cli_add_pay_and_dashboard(tmp_path: Path):
    store = tmp_path / "store.json"

    result_add = runner.invoke(
        app,
        [
            "add",
            "--medicine-name",
            "Adalimumab",
            "--dosage",
            "40mg",
            "--frequency",
            "weekly",
            "--monthly-cost",
            "650",
            "--disease-type",
            "Arthritis",
            "--store",
            str(store),
        ],
    )
    assert result_add.exit_code == 0, result_add.output
    assert "Saved Adalimumab" in result_add.output
    assert "$500/month" in result_add.output
    assert store.exists()

    result_pay = runner.invoke(app, ["pay", "--store", str(store)])
    assert result_pay.exit_code == 0, result_pay.output
    assert "processed successfully" in result_pay.output

    result_payments = runner.invoke(app, ["payments", "--store", str(store)])
    assert result_payments.exit_code == 0, result_payments.output
    assert "Total paid" in result_payments.output
    assert "emi" in result_payments.output

    result_dash = runner.invoke(app, ["dashboard", "--store", str(store)])
    assert result_dash.exit_code == 0, result_dash.output
    assert "high_cost" in result_dash.output
    assert "upcoming_payment" in result_dash.output

    data = json.loads(store.read_text())
    assert len(data["users"]["default"]["predictions"]) == 1


def test_cli_pay_without_projection_fails(tmp_path: Path):
    result = runner.invoke(app, ["pay", "--store", str(tmp_path / "store.json")])
    assert result.exit_code == 1


def test_cli_add_rejects_unknown_frequency(tmp_path: Path):
    result = runner.invoke(
        app,
        [
            "add",
            "--medicine-name",
            "X",
            "--dosage",
            "1mg",
            "--frequency",
            "hourly",
            "--monthly-cost",
            "5",
            "--disease-type",
            "Other",
            "--store",
            str(tmp_path / "store.json"),
        ],
    )
    assert result.exit_code == 2


def test_cli_add_rejects_negative_cost(tmp_path: Path):
    store = tmp_path / "store.json"
    result = runner.invoke(
        app,
        [
            "add",
            "--medicine-name",
            "X",
            "--dosage",
            "1mg",
            "--frequency",
            "Monthly",
            "--monthly-cost=-5",
            "--disease-type",
            "Other",
            "--store",
            str(store),
        ],
    )
    assert result.exit_code == 1
    assert not store.exists()


def test_cli_import_csv(tmp_path: Path):
    store = tmp_path / "store.json"
    result = runner.invoke(
        app,
        ["import", "--csv", str(DATA / "prescriptions.csv"), "--user", "bob", "--store", str(store)],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(store.read_text())
    bob = data["users"]["bob"]
    assert len(bob["prescriptions"]) == 3
    assert len(bob["predictions"]) == 3
    assert [a["alert_type"] for a in bob["alerts"]] == ["high_cost"]


def test_cli_import_rejects_unknown_choices_without_writing(tmp_path: Path):
    csv = tmp_path / "rx.csv"
    csv.write_text(
        "medicine_name,dosage,frequency,monthly_cost,disease_type\n"
        "Metformin,500mg,Twice daily,12.50,Diabetes\n"
        "X,1mg,Hourly,5,Flu\n"
    )
    store = tmp_path / "store.json"
    result = runner.invoke(app, ["import", "--csv", str(csv), "--store", str(store)])
    assert result.exit_code == 1
    assert "frequency must be one of" in result.output
    assert not store.exists()


def test_cli_config_with_out_of_range_amplitude_is_rejected(tmp_path: Path):
    config = tmp_path / "cfg.json"
    config.write_text(json.dumps({"projection": {"seasonal_amplitude": 3.0}}))
    result = runner.invoke(app, ["project", "--monthly-cost", "100", "--config", str(config)])
    assert result.exit_code == 2


def test_cli_corrupt_store_fails_cleanly(tmp_path: Path):
    store = tmp_path / "store.json"
    store.write_text("{not json")

    result_add = runner.invoke(
        app,
        [
            "add",
            "--medicine-name",
            "Metformin",
            "--dosage",
            "500mg",
            "--frequency",
            "Once daily",
            "--monthly-cost",
            "10",
            "--disease-type",
            "Diabetes",
            "--store",
            str(store),
        ],
    )
    assert result_add.exit_code == 1
    assert "Failed to save prescription" in result_add.output

    result_pay = runner.invoke(app, ["pay", "--store", str(store)])
    assert result_pay.exit_code == 1
    assert "Failed to process payment" in result_pay.output

    for command in ("dashboard", "payments"):
        result = runner.invoke(app, [command, "--store", str(store)])
        assert result.exit_code == 1
        assert "Failed to load your data" in result.output

    assert store.read_text() == "{not json"


def test_cli_dashboard_shows_emergency_fund_and_active_alerts(tmp_path: Path):
    store = tmp_path / "store.json"
    runner.invoke(app, ["import", "--csv", str(DATA / "prescriptions.csv"), "--store", str(store)])
    result = runner.invoke(app, ["dashboard", "--store", str(store)])
    assert result.exit_code == 0, result.output
    assert "Emergency fund" in result.output
    assert "Active alerts: 1" in result.output
