"""
Launch script for the JSON-LD Schema Builder API.

Checks the environment and starts the web application.

Usage:
    python run.py
"""
import os
import subprocess
import sys

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
APP_URL = os.environ.get("APP_URL", "http://localhost:8000")


def _print(msg: str) -> None:
    print(f"[run] {msg}")


def check_python_deps() -> bool:
    """Check that required Python packages are installed."""
    missing = []
    for pkg in ["fastapi", "uvicorn", "pydantic", "email_validator", "itsdangerous"]:
        try:
            __import__(pkg)
        except ImportError:
            missing.append(pkg)

    if missing:
        _print(f"Missing Python packages: {', '.join(missing)}")
        _print("Install with: pip install -e .[dev]")
        return False
    return True


def check_data_root() -> bool:
    """Check that the data directory exists (or can be created) and is writable."""
    data_root = os.environ.get("SCHEMA_DATA_ROOT", os.path.join(PROJECT_ROOT, "data"))
    try:
        os.makedirs(data_root, exist_ok=True)
    except OSError as e:
        _print(f"ERROR: cannot create data directory {data_root}: {e}")
        return False
    if not os.access(data_root, os.W_OK):
        _print(f"ERROR: data directory {data_root} is not writable.")
        return False
    return True


def check_production_config() -> bool:
    """In production the session secret must come from the environment."""
    if os.environ.get("APP_ENV", "").lower() == "production" and not os.environ.get("SESSION_SECRET"):
        _print("ERROR: SESSION_SECRET must be set when APP_ENV=production.")
        return False
    return True


def launch_app() -> int:
    """Launch the FastAPI web application via uvicorn."""
    _print(f"Launching JSON-LD Schema Builder at {APP_URL} ...")
    result = subprocess.run(
        [sys.executable, "-m", "src.web.app"],
        cwd=PROJECT_ROOT,
    )
    return result.returncode


def main() -> int:
    _print("=" * 50)
    _print("JSON-LD Schema Builder - Launcher")
    _print("=" * 50)

    _print("Checking Python dependencies...")
    if not check_python_deps():
        return 1
    _print("Python dependencies OK.")

    if not check_data_root():
        return 1

    if not check_production_config():
        return 1

    return launch_app()


if __name__ == "__main__":
    sys.exit(main())
