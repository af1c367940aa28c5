import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from rest_framework.test import APIClient

from prescription_tracker.models import Alert, AutoPaySetting, CostPrediction, Payment, Prescription
from prescription_tracker.stores import OrmPrescriptionStore
from prescription_tracker.tasks import process_autopay


pytestmark = pytest.mark.django_db


@pytest.fixture
def user():
    return get_user_model().objects.create_user("alice", password="s3cret-pass")


@pytest.fixture
def api(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def _rx(cost, **overrides):
    payload = {
        "medicine_name": "Insulin glargine",
        "dosage": "100 units/mL",
        "frequency": "Once daily",
        "monthly_cost": cost,
        "disease_type": "Diabetes",
    }
    payload.update(overrides)
    return payload


def test_register_creates_user():
    client = APIClient()
    resp = client.post("/api/register/", {"username": "bob", "password": "longenough1"}, format="json")
    assert resp.status_code == 201
    assert get_user_model().objects.filter(username="bob").exists()

    again = client.post("/api/register/", {"username": "bob", "password": "longenough1"}, format="json")
    assert again.status_code == 400


def test_endpoints_require_authentication():
    resp = APIClient().get("/api/dashboard/")
    assert resp.status_code in (401, 403)


def test_high_cost_prescription_creates_alert_and_projection(api, user):
    resp = api.post("/api/prescriptions/", _rx(501), format="json")
    assert resp.status_code == 201, resp.content
    body = resp.json()
    assert body["alert"]["alert_type"] == "high_cost"
    assert "Insulin glargine" in body["alert"]["message"]
    breakdown = body["projection"]["prediction_data"]["monthly_breakdown"]
    assert [m["month"] for m in breakdown][0] == "Jan"
    assert len(breakdown) == 12
    assert body["projection"]["monthly_emi"] == pytest.approx(body["projection"]["annual_cost"] / 12)

    assert Alert.objects.filter(user=user, alert_type="high_cost").count() == 1
    assert CostPrediction.objects.filter(user=user).count() == 1


def test_threshold_prescription_has_no_alert(api, user):
    resp = api.post("/api/prescriptions/", _rx(500), format="json")
    assert resp.status_code == 201
    assert resp.json()["alert"] is None
    assert Alert.objects.filter(user=user).count() == 0


@pytest.mark.parametrize(
    "payload",
    [_rx(-1), _rx(10, frequency="Hourly"), _rx(10, disease_type="Flu"), _rx(10, medicine_name="")],
)
def test_invalid_prescription_is_rejected(api, payload):
    resp = api.post("/api/prescriptions/", payload, format="json")
    assert resp.status_code == 400
    assert Prescription.objects.count() == 0


def test_latest_prediction_tracks_aggregate(api, user):
    assert api.get("/api/predictions/latest/").status_code == 404

    api.post("/api/prescriptions/", _rx(40), format="json")
    api.post("/api/prescriptions/", _rx(60, medicine_name="Metformin"), format="json")

    resp = api.get("/api/predictions/latest/")
    assert resp.status_code == 200
    latest = CostPrediction.objects.filter(user=user).first()
    assert resp.json()["monthly_emi"] == latest.monthly_emi
    assert CostPrediction.objects.filter(user=user).count() == 2
    assert len(api.get("/api/prescriptions/").json()) == 2


def test_empty_dashboard(api):
    body = api.get("/api/dashboard/").json()
    assert body["total_monthly_cost"] == 0
    assert body["monthly_emi"] == 0
    assert [p["month"] for p in body["trend"]] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    assert body["emi_breakdown"] == []
    assert body["affordability_risk"] is False


def test_dashboard_after_adds(api):
    api.post("/api/prescriptions/", _rx(650), format="json")
    body = api.get("/api/dashboard/").json()
    assert body["total_monthly_cost"] == pytest.approx(650.0)
    assert len(body["trend"]) == 12
    assert len(body["emi_breakdown"]) == 6
    assert body["affordability_risk"] is True
    assert body["recent_alerts"][0]["alert_type"] == "high_cost"


def test_payment_flow(api, user):
    assert api.post("/api/payments/").status_code == 409

    api.post("/api/prescriptions/", _rx(120), format="json")
    resp = api.post("/api/payments/")
    assert resp.status_code == 201
    paid = resp.json()
    assert paid["status"] == "completed"
    assert paid["payment_type"] == "emi"

    summary = api.get("/api/payments/").json()
    assert summary["total_paid"] == pytest.approx(paid["amount"])
    assert summary["pending_count"] == 0
    assert len(summary["payments"]) == 1
    assert Alert.objects.filter(user=user, alert_type="upcoming_payment").count() == 1


def test_autopay_toggle(api, user):
    assert api.get("/api/autopay/").json()["enabled"] is False
    resp = api.put("/api/autopay/", {"enabled": True}, format="json")
    assert resp.status_code == 200
    assert AutoPaySetting.objects.get(user=user).enabled is True


def test_autopay_task_pays_enabled_users_with_installments(api, user):
    api.post("/api/prescriptions/", _rx(80), format="json")
    AutoPaySetting.objects.create(user=user, enabled=True)
    idle = get_user_model().objects.create_user("carol", password="s3cret-pass")
    AutoPaySetting.objects.create(user=idle, enabled=True)

    assert process_autopay() == 1
    payment = Payment.objects.get(user=user)
    assert payment.payment_type == "autopay"
    assert not Payment.objects.filter(user=idle).exists()


def test_store_failure_returns_generic_message(api, monkeypatch):
    def boom(self, user_id, prescription):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(OrmPrescriptionStore, "insert", boom)
    resp = api.post("/api/prescriptions/", _rx(10), format="json")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Failed to save prescription. Please try again."


def test_alert_list_is_per_user(api, user):
    other = get_user_model().objects.create_user("dave", password="s3cret-pass")
    Alert.objects.create(user=other, alert_type="high_cost", message="not yours")
    api.post("/api/prescriptions/", _rx(900), format="json")
    alerts = api.get("/api/alerts/").json()
    assert [a["alert_type"] for a in alerts] == ["high_cost"]
    assert "not yours" not in alerts[0]["message"]


def test_cost_is_rounded_before_alert_check(api, user):
    resp = api.post("/api/prescriptions/", _rx(500.004), format="json")
    assert resp.status_code == 201, resp.content
    body = resp.json()
    assert body["alert"] is None
    assert body["prescription"]["monthly_cost"] == 500.0
    assert float(Prescription.objects.get(user=user).monthly_cost) == 500.0
    assert Alert.objects.filter(user=user).count() == 0


def test_cost_beyond_column_precision_is_rejected(api):
    resp = api.post("/api/prescriptions/", _rx(1e12), format="json")
    assert resp.status_code == 400
    assert Prescription.objects.count() == 0


def test_created_alert_reports_its_timestamp(api, user):
    body = api.post("/api/prescriptions/", _rx(501), format="json").json()
    assert body["alert"]["created_at"] is not None
    stored = Alert.objects.get(user=user)
    assert body["alert"]["created_at"] == stored.created_at.isoformat()


def test_dashboard_reports_emergency_fund_and_active_alerts(api, user):
    empty = api.get("/api/dashboard/").json()
    assert empty["emergency_fund"] == 0
    assert empty["active_alerts"] == 0

    resp = api.post("/api/prescriptions/", _rx(650), format="json")
    projection = resp.json()["projection"]
    assert projection["emergency_fund"] == pytest.approx(projection["annual_cost"] * 0.2)

    Alert.objects.create(user=user, alert_type="upcoming_payment", message="old", is_read=True)
    body = api.get("/api/dashboard/").json()
    assert body["emergency_fund"] == pytest.approx(body["annual_cost"] * 0.2)
    assert body["active_alerts"] == 1
