"""Convenience launcher for the DropZone development server.

Usage:
    Windows: python start_dev.py
    Linux:   python3 start_dev.py

Runs Uvicorn with --reload from ``backend/``, preferring the backend
virtual environment when one exists. Press Ctrl+C to stop.

Environment overrides (``DROPZONE_*``) are passed through, e.g.
``DROPZONE_RECORD_BACKEND=http`` to talk to a remote record API.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
BACKEND_DIR = ROOT_DIR / "backend"
VENV_DIR = BACKEND_DIR / ".venv"

if os.name == "nt":
    os.system("")  # enable VT100 on Windows 10+

CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"


def log(level: str, msg: str) -> None:
    colors = {"info": CYAN, "start": GREEN, "stop": YELLOW, "error": RED}
    print(f"{colors.get(level, '')}[{level}]{RESET} {msg}")


def resolve_python() -> str:
    """Backend venv interpreter if present, else the current one."""
    candidates = (
        [VENV_DIR / "Scripts" / "python.exe"]
        if os.name == "nt"
        else [VENV_DIR / "bin" / "python", VENV_DIR / "bin" / "python3"]
    )
    for candidate in candidates:
        if candidate.exists():
            return str(candidate)
    log("info", "No venv found — using current Python")
    return sys.executable


def check_dependencies(python: str) -> bool:
    result = subprocess.run(
        [python, "-c", "import fastapi, uvicorn, sqlalchemy, apscheduler, dropzone"],
        capture_output=True,
        text=True,
        cwd=BACKEND_DIR,
    )
    if result.returncode != 0:
        log("error", "Missing dependencies. Run:")
        log("error", f"  cd {ROOT_DIR} && pip install -e '.[test]'")
        return False
    return True


def stop(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    log("stop", "backend")
    try:
        if os.name == "nt":
            proc.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
        proc.wait(timeout=10)
    except ProcessLookupError:
        pass
    except subprocess.TimeoutExpired:
        proc.kill()


def main() -> int:
    python = resolve_python()
    port = os.environ.setdefault("DROPZONE_PORT", "8000")
    os.environ.setdefault("DROPZONE_DEBUG", "true")
    os.environ.setdefault("DROPZONE_LOG_LEVEL", "INFO")
    backend = os.environ.setdefault("DROPZONE_RECORD_BACKEND", "sql")

    log("info", f"Python:  {python}")
    log("info", f"Records: {backend}")
    if not check_dependencies(python):
        return 1

    cmd = [python, "-m", "uvicorn", "dropzone.main:app", "--reload", "--port", port]
    log("start", " ".join(cmd))
    if os.name == "nt":
        proc = subprocess.Popen(
            cmd, cwd=BACKEND_DIR, creationflags=subprocess.CREATE_NEW_PROCESS_GROUP
        )
    else:
        proc = subprocess.Popen(cmd, cwd=BACKEND_DIR, start_new_session=True)

    log("info", f"  API:     http://localhost:{port}/api")
    log("info", f"  Session: http://localhost:{port}/api/session")
    log("info", f"  Docs:    http://localhost:{port}/docs")

    try:
        while proc.poll() is None:
            time.sleep(0.5)
        log("info", f"backend exited with code {proc.returncode}")
        return proc.returncode
    except KeyboardInterrupt:
        print()
        log("info", "Ctrl+C received, shutting down...")
        return 0
    finally:
        stop(proc)


if __name__ == "__main__":
    raise SystemExit(main())
