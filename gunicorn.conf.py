# gunicorn.conf.py
# start: gunicorn -c gunicorn.conf.py somahsap.main:app
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
# JSON-documenten op schijf: elke worker schrijft via atomic replace
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "somahsap.main:app"
preload_app = False
timeout = 60
graceful_timeout = 20
keepalive = 5
max_requests = 1000
max_requests_jitter = 100
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
