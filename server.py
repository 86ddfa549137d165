#!/usr/bin/env python3
"""
Server management script.

Runs the planning API with the host, port and log level from settings.

Usage:
    python server.py start   # Start server in the foreground (Ctrl+C to stop)
    python server.py status  # Check whether something answers on the API port
"""

import socket
import sys

import uvicorn

from config import settings


def port_in_use(host: str, port: int) -> bool:
    """True when a socket on host:port accepts connections."""
    probe_host = "127.0.0.1" if host == "0.0.0.0" else host
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(1)
        return sock.connect_ex((probe_host, port)) == 0


def start_server():
    """Start uvicorn; reload only in debug."""
    if port_in_use(settings.api_host, settings.api_port):
        print(f"[ERROR] Port {settings.api_port} is already in use!")
        print("   Stop the running server or set API_PORT")
        sys.exit(1)

    print(f"[OK] API: http://localhost:{settings.api_port}")
    if settings.debug:
        print(f"[OK] Docs: http://localhost:{settings.api_port}/docs")
    print("\nPress Ctrl+C to stop")

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


def show_status():
    """Show server status."""
    if port_in_use(settings.api_host, settings.api_port):
        print(f"[OK] Server is running on port {settings.api_port}")
    else:
        print("[NOT RUNNING] Server is not running")
        print("              Start with: python server.py start")


def main():
    """Main entry point."""
    command = sys.argv[1] if len(sys.argv) > 1 else "start"

    if command == "start":
        start_server()
    elif command == "status":
        show_status()
    else:
        print("Usage: python server.py [start|status]")
        sys.exit(1)


if __name__ == "__main__":
    main()
