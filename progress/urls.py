from django.urls import path
from .views import StudyProgressView

urlpatterns = [
    path("<str:deck_id>", StudyProgressView.as_view(), name="study-progress"),
]
