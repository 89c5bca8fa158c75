"""Tests for application wiring."""

from chunkget.app import App, create_app
from chunkget.config.settings import Settings
from chunkget.infrastructure import logging as logging_module


def test_create_app_uses_given_settings(test_settings):
    app = create_app(settings=test_settings)

    assert isinstance(app, App)
    assert app.settings is test_settings


def test_create_app_defaults_and_configures_logging():
    app = create_app()

    assert isinstance(app.settings, Settings)
    assert logging_module._configured
