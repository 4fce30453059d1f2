# gunicorn.conf.py
"""
Gunicorn configuration for the client portal.

Serves portal.wsgi. Uploaded documents can be large, so the worker
timeout follows DOCUMENT_MAX_UPLOAD_MB rather than a fixed value.
"""
import multiprocessing
import os

# Server socket
bind = os.environ.get('PORTAL_BIND', '0.0.0.0:8000')
backlog = 2048

# Worker processes
workers = int(os.environ.get('PORTAL_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = max(60, int(os.environ.get('DOCUMENT_MAX_UPLOAD_MB', '50')) * 2)
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

preload_app = True

# Spool uploads to disk instead of memory
tmp_upload_dir = os.environ.get('PORTAL_UPLOAD_TMP') or None

# Logging
accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = 'portal-gunicorn'
graceful_timeout = 30

# TLS terminates at the reverse proxy
forwarded_allow_ips = os.environ.get('FORWARDED_ALLOW_IPS', '127.0.0.1')
secure_scheme_headers = {
    'X-FORWARDED-PROTO': 'https',
}
