"""
App configuration for the core app.
"""
import logging
import os

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """App configuration for core."""

    name = "core"
    verbose_name = "License Gateway Core"

    def ready(self):
        """Called when Django starts."""
        # Django's autoreloader parent process does not serve requests
        if os.environ.get("RUN_MAIN") == "false":
            return

        self.register_event_handlers()
        if os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
            self.setup_observability()

    def setup_observability(self):
        """Setup tracing export after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Tracing export is optional, the service runs without it
            logger.warning("Failed to setup OpenTelemetry: %s", e)

    def register_event_handlers(self):
        """Register event handlers after apps are ready."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
