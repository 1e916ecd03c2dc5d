import os

os.environ.setdefault("RL_OTEL_ENABLED", "false")
os.environ.setdefault("RL_STORE_BACKEND", "memory")
