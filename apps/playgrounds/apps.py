"""
apps.playgrounds.apps
"""
from django.apps import AppConfig


class PlaygroundsConfig(AppConfig):
    name = "apps.playgrounds"
    label = "playgrounds"
    verbose_name = "Playgrounds"
