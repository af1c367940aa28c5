from django.urls import include, path

urlpatterns = [
    path("api/", include("prescription_tracker.urls")),
]
