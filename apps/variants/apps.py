"""
apps.variants.apps
"""
from django.apps import AppConfig


class VariantsConfig(AppConfig):
    name = "apps.variants"
    label = "variants"
    verbose_name = "Variants"
