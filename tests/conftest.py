import os
import tempfile

# Keep log files out of the project tree while testing
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="cyberprobe-bigquery-logs-"))
