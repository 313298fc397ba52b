from __future__ import annotations
import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "erp_project.settings")

celery_app = Celery("erp_project")

# CELERY_BROKER_URL, CELERY_BEAT_SCHEDULE... live in erp_project.settings
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# picks up ledger_core.tasks (reconciliation, overdue sweep)
celery_app.autodiscover_tasks()
