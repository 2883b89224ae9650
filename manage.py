#!/usr/bin/env python3
"""
NovaBill management CLI.

Usage:
    python manage.py start       Start the API server in the background
    python manage.py stop        Graceful shutdown
    python manage.py restart     Stop + start
    python manage.py dev         Start the server in the foreground with reload
    python manage.py status      Check if server is running
    python manage.py migrate     Apply pending database migrations
"""

import argparse
import asyncio
import os
import platform
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".novabill.pid"

IS_WINDOWS = platform.system() == "Windows"


def _read_pid() -> int | None:
    """Read PID from the PID file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}", "/NH"],
                capture_output=True,
                text=True,
            )
            return str(pid) in result.stdout
        except OSError:
            return False
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _kill_pid(pid: int) -> bool:
    """Send termination signal to a process. Returns True if successful."""
    try:
        if IS_WINDOWS:
            subprocess.run(["taskkill", "/PID", str(pid), "/T", "/F"], capture_output=True)
        else:
            os.kill(pid, signal.SIGTERM)
        return True
    except OSError:
        return False


def _wait_for_exit(pid: int, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)
    return not _is_pid_alive(pid)


def _is_port_free(port: int) -> bool:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def _uvicorn_cmd(host: str, port: int, reload: bool = False) -> list[str]:
    # one worker only: the active session lives in process memory
    cmd = [
        sys.executable, "-m", "uvicorn",
        "src.api.main:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        cmd.append("--reload")
    return cmd


def cmd_start(args: argparse.Namespace) -> None:
    """Start the server in the background."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Error: Port {args.port} is in use.")
        sys.exit(1)

    print(f"Starting server on {args.host}:{args.port}...")
    popen_kwargs: dict = {"cwd": str(ROOT_DIR)}
    if IS_WINDOWS:
        popen_kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
    proc = subprocess.Popen(_uvicorn_cmd(args.host, args.port), **popen_kwargs)

    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    if _kill_pid(pid) and not _wait_for_exit(pid):
        print("Warning: Process did not exit within 3 seconds.")

    PID_FILE.unlink(missing_ok=True)
    print("Server stopped." if not _is_pid_alive(pid) else "Warning: Server may still be running.")


def cmd_restart(args: argparse.Namespace) -> None:
    """Stop then start the server."""
    cmd_stop(args)
    cmd_start(args)


def cmd_dev(args: argparse.Namespace) -> None:
    """Run the server in the foreground with --reload."""
    print(f"Starting backend on {args.host}:{args.port} (reload mode). Ctrl+C to stop.")
    try:
        subprocess.run(_uvicorn_cmd(args.host, args.port, reload=True), cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        print("\nDev server stopped.")


async def _storage_status() -> tuple[list, list[str] | None]:
    """Pending migrations, and the stored workspaces once the schema is current."""
    from src.application.services import get_gateway
    from src.infrastructure.storage.sqlite import close_pool
    from src.infrastructure.storage.sqlite.migrations import pending_migrations

    pending = await pending_migrations()
    if pending:
        return pending, None
    try:
        scopes = await (await get_gateway()).scopes()
    finally:
        await close_pool()
    return pending, scopes


def cmd_status(args: argparse.Namespace) -> None:
    """Report the server process, the schema state and the stored workspaces."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file, but port {args.port} is in use.")
    else:
        print(f"Server is not running (port {args.port} is free).")

    pending, scopes = asyncio.run(_storage_status())
    if pending:
        names = ", ".join(f"v{m.version}_{m.name}" for m in pending)
        print(f"Pending migrations: {names} (run: python manage.py migrate)")
    else:
        print("Database schema is up to date.")
        print(f"Stored workspaces: {len(scopes)}")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations to the configured database."""
    from src.config import configure_logging
    from src.infrastructure.storage.sqlite.migrations import run_migrations

    configure_logging()
    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))

    if not results:
        print("Database is up to date.")
        return
    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  v{result.version} {result.name}: {state} ({result.execution_time_ms} ms)")
    if not all(r.success for r in results):
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="NovaBill management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("start", cmd_start, "Start the server in the background"),
        ("restart", cmd_restart, "Restart the server"),
        ("dev", cmd_dev, "Start the server with auto-reload"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
        p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
        p.set_defaults(func=func)

    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    p_status = sub.add_parser("status", help="Check if server is running")
    p_status.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
    p_status.set_defaults(func=cmd_status)

    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
