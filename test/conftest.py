import sys
from pathlib import Path

# Repo root holds the top-level packages (core, providers, transfer)
REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
