from django.urls import include, path

urlpatterns = [
    path("api/progress/", include("progress.urls")),
    path("api/activities", include("activities.urls")),
]
