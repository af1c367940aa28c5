from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from rxcost_core.domain.models import DISEASE_TYPES, FREQUENCIES
from rxcost_core.services.alerts import is_affordability_risk
from rxcost_core.services.pipeline import MAX_MONTHLY_COST

from .models import Alert, AutoPaySetting, Payment, Prescription


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(min_length=8, write_only=True)

    def validate_username(self, value):
        if get_user_model().objects.filter(username=value).exists():
            raise serializers.ValidationError("Username already taken")
        return value

    def create(self, validated_data):
        return get_user_model().objects.create_user(
            username=validated_data["username"],
            email=validated_data.get("email", ""),
            password=validated_data["password"],
        )


class PrescriptionRequestSerializer(serializers.Serializer):
    medicine_name = serializers.CharField(max_length=120)
    dosage = serializers.CharField(max_length=60)
    frequency = serializers.ChoiceField(choices=list(FREQUENCIES))
    monthly_cost = serializers.FloatField(min_value=0.0, max_value=MAX_MONTHLY_COST)
    disease_type = serializers.ChoiceField(choices=list(DISEASE_TYPES))


class PrescriptionSerializer(serializers.ModelSerializer):
    monthly_cost = serializers.FloatField()

    class Meta:
        model = Prescription
        fields = [
            "id",
            "created_at",
            "medicine_name",
            "dosage",
            "frequency",
            "monthly_cost",
            "disease_type",
        ]


class AlertSerializer(serializers.ModelSerializer):
    class Meta:
        model = Alert
        fields = ["id", "created_at", "alert_type", "message", "is_read"]


class PaymentSerializer(serializers.ModelSerializer):
    amount = serializers.FloatField()

    class Meta:
        model = Payment
        fields = ["id", "created_at", "amount", "payment_date", "status", "payment_type"]


class AutoPaySerializer(serializers.ModelSerializer):
    class Meta:
        model = AutoPaySetting
        fields = ["enabled", "updated_at"]
        read_only_fields = ["updated_at"]


def projection_payload(result, policy) -> dict:
    return {
        "annual_cost": result.annual_cost,
        "monthly_emi": result.monthly_installment,
        "emergency_fund": result.emergency_fund,
        "affordability_risk": is_affordability_risk(result.monthly_installment, policy),
        "prediction_data": result.prediction_data(),
    }


def alert_record_payload(alert) -> dict:
    return {
        "alert_type": alert.alert_type,
        "message": alert.message,
        "is_read": alert.is_read,
        "created_at": alert.created_at.isoformat() if alert.created_at else None,
    }
