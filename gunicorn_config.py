"""
Gunicorn configuration for the try-on backend.

    gunicorn -c gunicorn_config.py tryon_backend.wsgi:application
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:8000")  # behind Nginx
backlog = 2048

# Try-on requests hold a worker for the whole inference call, so size the
# pool by CPU and keep sync workers.
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"

# End-to-end request limit. Must stay above TRYON_TIMEOUT_SECONDS plus the
# two image uploads; Nginx proxy_read_timeout should match.
timeout = int(os.getenv("GUNICORN_TIMEOUT", 120))
graceful_timeout = 30
keepalive = 5

# Logging to stdout/stderr (captured by systemd/journald)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
# %(D)s = request duration in microseconds
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(a)s" %(D)s'

proc_name = "tryon-backend"

daemon = False
pidfile = None
umask = 0o007

max_requests = 1000
max_requests_jitter = 50
