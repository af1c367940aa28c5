from django.conf import settings
from django.db import models

from rxcost_core.domain.models import DISEASE_TYPES, FREQUENCIES


class Prescription(models.Model):
    FREQUENCY_CHOICES = [(f, f) for f in FREQUENCIES]
    DISEASE_CHOICES = [(d, d) for d in DISEASE_TYPES]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="prescriptions")
    created_at = models.DateTimeField(auto_now_add=True)
    medicine_name = models.CharField(max_length=120)
    dosage = models.CharField(max_length=60)
    frequency = models.CharField(max_length=32, choices=FREQUENCY_CHOICES)
    monthly_cost = models.DecimalField(max_digits=10, decimal_places=2)
    disease_type = models.CharField(max_length=32, choices=DISEASE_CHOICES)

    class Meta:
        ordering = ["-created_at", "-id"]


class CostPrediction(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cost_predictions")
    created_at = models.DateTimeField(auto_now_add=True)
    annual_cost = models.FloatField()
    monthly_emi = models.FloatField()
    prediction_data = models.JSONField(default=dict)

    class Meta:
        ordering = ["-created_at", "-id"]


class Payment(models.Model):
    STATUS_CHOICES = [
        ("completed", "Completed"),
        ("pending", "Pending"),
        ("failed", "Failed"),
    ]
    TYPE_CHOICES = [
        ("emi", "EMI"),
        ("autopay", "Auto-pay"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="payments")
    created_at = models.DateTimeField(auto_now_add=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_date = models.DateTimeField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="completed")
    payment_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default="emi")

    class Meta:
        ordering = ["-created_at", "-id"]


class Alert(models.Model):
    KIND_CHOICES = [
        ("high_cost", "High cost"),
        ("upcoming_payment", "Upcoming payment"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="alerts")
    created_at = models.DateTimeField(auto_now_add=True)
    alert_type = models.CharField(max_length=32, choices=KIND_CHOICES)
    message = models.TextField()
    is_read = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]


class AutoPaySetting(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="autopay")
    enabled = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)
