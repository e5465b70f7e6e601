# Reverse proxy should point to this local origin.
bind = "127.0.0.1:8000"
chdir = "src"
wsgi_app = "run:app"

# Request handling is stateless apart from the in-process caches; each worker
# keeps its own copy of them. Threads share a worker's caches.
workers = 2
threads = 8
worker_class = "gthread"

timeout = 30
graceful_timeout = 30
keepalive = 5

# Let systemd/journald handle logs.
accesslog = "-"
errorlog = "-"
loglevel = "info"
capture_output = True

# Restart workers periodically to limit long-lived memory growth.
max_requests = 1000
max_requests_jitter = 100

# Security/robustness
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190
