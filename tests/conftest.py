import os
import tempfile

# storage paths are resolved when statscore.core.constants is imported
os.environ.setdefault("STATSCORE_HOME", tempfile.mkdtemp(prefix="statscore-test-"))
os.environ.setdefault("STATSCORE_LOG_LEVEL", "WARNING")
