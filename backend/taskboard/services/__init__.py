# backend/taskboard/services/__init__.py
"""
Services package.

Submodules are imported directly (services.logger, services.recurrence,
services.manual_reset_service) to keep the logger free of import cycles.
"""
