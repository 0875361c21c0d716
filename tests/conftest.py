import os
import tempfile

# Keep test runs from writing into ./logs; must happen before main is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="chatproxy-logs-"))
os.environ.setdefault("SERVE_UI", "true")
