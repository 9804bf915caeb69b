import os
import sys
import tempfile
from pathlib import Path

# Ensure repository root is on sys.path for module imports (app, dinorun)
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Headless / test mode environment variables (must precede dinorun imports:
# settings and high score paths are resolved at import time).
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("DINORUN_DATA_DIR", tempfile.mkdtemp(prefix="dinorun-test-"))
