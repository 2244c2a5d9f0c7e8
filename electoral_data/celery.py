# electoral_data/celery.py
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'electoral_data.settings.development')

app = Celery('electoral_data')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
