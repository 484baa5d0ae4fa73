import sys
from pathlib import Path


# Make the top-level modules (app, charts, loader, ...) importable when running pytest from repo root
THIS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = THIS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))
