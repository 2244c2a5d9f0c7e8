# gunicorn_config.py
import multiprocessing

bind = "0.0.0.0:8000"
wsgi_app = "electoral_data.wsgi:application"
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "sync"
max_requests = 1000
max_requests_jitter = 50
timeout = 60
keepalive = 2
errorlog = "/var/log/gunicorn/electoral_data_error.log"
accesslog = "/var/log/gunicorn/electoral_data_access.log"
loglevel = "info"
