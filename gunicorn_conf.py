# Gunicorn settings for serving server:app behind Uvicorn workers
import os

wsgi_app = "server:app"
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("GUNICORN_WORKERS", "1"))
bind = f"0.0.0.0:{os.environ.get('PORT', '8111')}"
loglevel = os.environ.get("LOG_LEVEL", "INFO").lower()
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
accesslog = "-"
errorlog = "-"
