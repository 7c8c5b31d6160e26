"""Gunicorn configuration for StressCheck production deployment.

    STRESSCHECK_CONFIG=production gunicorn -c gunicorn.conf.py run:app
"""

import os

# Server socket
bind = os.environ.get('STRESSCHECK_BIND', '0.0.0.0:8000')

# The history file is shared: one process, several threads
workers = 1
worker_class = 'gthread'
threads = 4

# Timeout
timeout = 60

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'
