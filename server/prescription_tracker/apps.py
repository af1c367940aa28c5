from django.apps import AppConfig


class PrescriptionTrackerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "prescription_tracker"
