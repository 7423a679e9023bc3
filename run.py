# Root launcher for the estimate API.
from pathlib import Path
import sys

BASE = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE / "backend"))  # allow 'from sitter_quote import create_app'

from sitter_quote import create_app  # type: ignore

if __name__ == "__main__":
    app = create_app()
    # You can change host/port here if needed
    app.run(host="127.0.0.1", port=5050, debug=True)
