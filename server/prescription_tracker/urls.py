from django.urls import path

from .views import (
    AlertListView,
    AutoPayView,
    DashboardView,
    LatestPredictionView,
    PaymentView,
    PrescriptionView,
    RegisterView,
)

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("prescriptions/", PrescriptionView.as_view(), name="prescriptions"),
    path("predictions/latest/", LatestPredictionView.as_view(), name="prediction-latest"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path("payments/", PaymentView.as_view(), name="payments"),
    path("autopay/", AutoPayView.as_view(), name="autopay"),
    path("alerts/", AlertListView.as_view(), name="alerts"),
]
