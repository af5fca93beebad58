"""
Gunicorn configuration for Tasklane production deployment.

Usage:
    gunicorn tasklane.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

bind = os.getenv("TASKLANE_BIND", "0.0.0.0:8000")

# Worker processes: CPU cores * 2 + 1 (Gunicorn recommendation)
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds); every request is a short DB round trip
timeout = 30

keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = "info"
