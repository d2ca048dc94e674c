"""
Model registry for the licenses app.

Django discovers models through this module.
"""
from licenses.infrastructure.models import License  # noqa: F401
