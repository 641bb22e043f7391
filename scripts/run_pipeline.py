from pathlib import Path
import sys

# Ensure src is on path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from pipeline import run_all


def main():
    return run_all()


if __name__ == "__main__":
    sys.exit(main())
