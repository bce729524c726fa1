#!/usr/bin/env python3
"""
Application startup script with command line overrides.
"""

import argparse


def main():
    """Main startup function"""
    parser = argparse.ArgumentParser(description="GlobeTrotter API Server")
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (overrides config)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (overrides config)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (overrides config)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (overrides config)"
    )

    args = parser.parse_args()

    # Import late so --help works without SESSION_SECRET
    from globetrotter.config.settings import get_settings
    settings = get_settings()

    host = args.host or settings.host
    port = args.port or settings.port
    workers = args.workers or settings.workers
    reload = args.reload or settings.reload

    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"   Environment: {settings.environment.value}")
    print(f"   Host: {host}")
    print(f"   Port: {port}")
    print(f"   Workers: {workers}")
    print(f"   Session backend: {settings.session.backend}")

    import uvicorn

    uvicorn.run(
        "globetrotter.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,
        log_level=settings.log_level.value.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
