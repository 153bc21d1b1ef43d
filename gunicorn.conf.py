"""Gunicorn configuration for the traceability API."""

import os

# ASGI worker; start with `gunicorn app.main:app`
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "app.main:app"

bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"

workers = int(os.getenv("WEB_CONCURRENCY", "2"))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
accesslog = "-"
