import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "rxcost_server.settings")

app = Celery("rxcost_server")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
