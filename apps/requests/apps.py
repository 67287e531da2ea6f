"""
apps.requests.apps
"""
from django.apps import AppConfig


class RequestsConfig(AppConfig):
    name = "apps.requests"
    label = "llm_requests"
    verbose_name = "LLM Requests"
