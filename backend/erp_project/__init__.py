# Celery instance is defined in erp_project/celery.py
# Importing it here makes sure the app is loaded whenever Django starts,
# so @shared_task decorators bind to it
from .celery import celery_app

# 'from erp_project import *', only exports celery_app
__all__ = ("celery_app",)

""" Start a worker with: "celery -A erp_project worker -l info"
    -A erp_project imports erp_project/__init__.py,
    which exposes celery_app. """
