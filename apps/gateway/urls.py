"""
apps.gateway.urls
~~~~~~~~~~~~~~~~~
Mounted at /v1/ by the root URLconf; every route lives under ``genai/``.
"""
from django.urls import path

from .views import GatewayHealthView, GatewayStubView

_GET = ["get", "options"]
_POST = ["post", "options"]
_GET_POST = ["get", "post", "options"]
_GET_DELETE = ["get", "delete", "options"]

# (route, operation, verbs)
_OPERATIONS = [
    ("chat/completions/", "chat.completions", _POST),
    ("completions/", "completions", _POST),
    ("embeddings/", "embeddings", _POST),
    ("models/", "models.list", _GET),
    ("models/<str:model_id>/", "models.retrieve", _GET),
    ("audio/speech/", "audio.speech", _POST),
    ("audio/transcriptions/", "audio.transcriptions", _POST),
    ("audio/translations/", "audio.translations", _POST),
    ("images/generations/", "images.generations", _POST),
    ("images/edits/", "images.edits", _POST),
    ("batches/", "batches", _GET_POST),
    ("batches/<str:batch_id>/", "batches.retrieve", _GET),
    ("batches/<str:batch_id>/cancel/", "batches.cancel", _POST),
    ("files/", "files", _GET_POST),
    ("files/<str:file_id>/", "files.retrieve", _GET_DELETE),
    ("files/<str:file_id>/content/", "files.content", _GET),
    ("fine_tuning/jobs/", "fine_tuning.jobs", _GET_POST),
    ("fine_tuning/jobs/<str:job_id>/", "fine_tuning.jobs.retrieve", _GET),
    ("fine_tuning/jobs/<str:job_id>/cancel/", "fine_tuning.jobs.cancel", _POST),
    ("fine_tuning/jobs/<str:job_id>/events/", "fine_tuning.jobs.events", _GET),
    ("fine_tuning/jobs/<str:job_id>/checkpoints/", "fine_tuning.jobs.checkpoints", _GET),
    ("responses/", "responses", _POST),
    ("responses/<str:response_id>/", "responses.retrieve", _GET_DELETE),
    ("responses/<str:response_id>/input_items/", "responses.input_items", _GET),
]

urlpatterns = [
    path("genai/health/", GatewayHealthView.as_view(), name="gateway-health"),
] + [
    path(
        f"genai/{route}",
        GatewayStubView.as_view(operation=operation, http_method_names=verbs),
        name=f"gateway-{operation.replace('.', '-').replace('_', '-')}",
    )
    for route, operation, verbs in _OPERATIONS
]
