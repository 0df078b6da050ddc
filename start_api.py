#!/usr/bin/env python3
"""
Startup script for the Lunchtime Meetups API server.

Usage:
    python start_api.py              # Development mode
    python start_api.py --prod       # Production mode
    python start_api.py --offline    # Serve placeholder events only
"""

import argparse
import os
import uvicorn
from dotenv import load_dotenv


def main():
    """Start the FastAPI server with configurable options."""
    load_dotenv()
    os.environ.setdefault("WATCHFILES_FORCE_POLLING", "1")
    parser = argparse.ArgumentParser(description="Start Lunchtime Meetups API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8001, help="Port to bind to (default: 8001)")
    parser.add_argument("--prod", action="store_true", help="Run in production mode (no auto-reload)")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes (default: 1)")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Never call connpass; answer every range with placeholder events"
    )

    args = parser.parse_args()

    if args.offline:
        # Read by ingest.settings.load_settings in each worker
        os.environ["LUNCH_OFFLINE"] = "1"

    config = {
        "app": "api.main:app",
        "host": args.host,
        "port": args.port,
        "loop": "asyncio",
        "http": "h11",
    }

    if args.prod:
        print(f"🚀 Starting Lunchtime Meetups API in PRODUCTION mode")
        print(f"   📍 http://{args.host}:{args.port}")
        print(f"   👷 {args.workers} worker(s)")
        config.update({"workers": args.workers, "log_level": "info"})
    else:
        reload_enabled = not args.no_reload
        print(f"🔧 Starting Lunchtime Meetups API in DEVELOPMENT mode")
        print(f"   📍 http://{args.host}:{args.port}")
        print(f"   📚 API docs: http://{args.host}:{args.port}/docs")
        if not os.getenv("CONNPASS_API_KEY"):
            print(f"   ℹ️  CONNPASS_API_KEY not set, querying connpass anonymously")
        config["log_level"] = "debug"
        if reload_enabled:
            config.update({
                "reload": True,
                "reload_dirs": ["api", "ingest", "pipeline"],
                "reload_delay": 1.0
            })

    if args.offline:
        print(f"   🍱 Offline mode: placeholder events only")

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
