import dataclasses
import logging

from django.db import DatabaseError, transaction
from django.http import Http404
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from rxcost_core.domain.errors import InvalidInput, NoInstallmentDue
from rxcost_core.domain.models import Prescription as PrescriptionEntry
from rxcost_core.services import dashboard as dashboard_service
from rxcost_core.services import payments as payment_service
from rxcost_core.services import pipeline

from .conf import load_settings
from .models import Alert, AutoPaySetting, Payment, Prescription
from .serializers import (
    AlertSerializer,
    AutoPaySerializer,
    PaymentSerializer,
    PrescriptionRequestSerializer,
    PrescriptionSerializer,
    RegisterSerializer,
    alert_record_payload,
    projection_payload,
)
from .stores import orm_stores

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save prescription. Please try again."
PAYMENT_FAILED = "Failed to process payment. Please try again."


class RegisterView(APIView):
    permission_classes = [AllowAny]
    parser_classes = [JSONParser, FormParser]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({"id": user.id, "username": user.username}, status=status.HTTP_201_CREATED)


class PrescriptionView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def get(self, request):
        rows = Prescription.objects.filter(user=request.user)
        return Response(PrescriptionSerializer(rows, many=True).data)

    def post(self, request):
        serializer = PrescriptionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = PrescriptionEntry(**serializer.validated_data)

        config, policy = load_settings()
        try:
            with transaction.atomic():
                outcome = pipeline.record_prescription(request.user.id, entry, orm_stores(), config, policy)
        except InvalidInput as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception("Error saving prescription for user %s", request.user.id)
            return Response({"detail": SAVE_FAILED}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        payload = {
            "prescription": dataclasses.asdict(outcome.prescription),
            "alert": alert_record_payload(outcome.alert) if outcome.alert else None,
            "projection": projection_payload(outcome.projection, policy),
        }
        return Response(payload, status=status.HTTP_201_CREATED)


class LatestPredictionView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        result = orm_stores().predictions.latest(request.user.id)
        if result is None:
            raise Http404
        _, policy = load_settings()
        return Response(projection_payload(result, policy))


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        _, policy = load_settings()
        summary = dashboard_service.build_dashboard(request.user.id, orm_stores(), policy)
        return Response(
            {
                "total_monthly_cost": summary.total_monthly_cost,
                "annual_cost": summary.annual_cost,
                "monthly_emi": summary.monthly_installment,
                "emergency_fund": summary.emergency_fund,
                "affordability_risk": summary.affordability_risk,
                "active_alerts": summary.active_alerts,
                "recent_alerts": [alert_record_payload(a) for a in summary.recent_alerts],
                "trend": [p.to_dict() for p in summary.trend],
                "emi_breakdown": [p.to_dict() for p in summary.emi_breakdown],
            }
        )


class PaymentView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        summary = payment_service.summarize_payments(request.user.id, orm_stores())
        rows = Payment.objects.filter(user=request.user)
        return Response(
            {
                "monthly_emi": summary.monthly_installment,
                "total_paid": summary.total_paid,
                "pending_count": summary.pending_count,
                "payments": PaymentSerializer(rows, many=True).data,
            }
        )

    def post(self, request):
        try:
            with transaction.atomic():
                payment = payment_service.make_payment(request.user.id, orm_stores())
        except NoInstallmentDue as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except DatabaseError:
            logger.exception("Error processing payment for user %s", request.user.id)
            return Response({"detail": PAYMENT_FAILED}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            {
                "amount": payment.amount,
                "payment_date": payment.payment_date.isoformat(),
                "status": payment.status,
                "payment_type": payment.payment_type,
            },
            status=status.HTTP_201_CREATED,
        )


class AutoPayView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, FormParser]

    def get(self, request):
        setting, _ = AutoPaySetting.objects.get_or_create(user=request.user)
        return Response(AutoPaySerializer(setting).data)

    def put(self, request):
        setting, _ = AutoPaySetting.objects.get_or_create(user=request.user)
        serializer = AutoPaySerializer(setting, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class AlertListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        rows = Alert.objects.filter(user=request.user)
        return Response(AlertSerializer(rows, many=True).data)
