#!/usr/bin/env python3
"""Kea Config Panel Development Server"""
import os
import sys
import argparse
from pathlib import Path

import yaml


DEFAULT_CONFIG = {"port": 8000, "host": "127.0.0.1"}


def load_config(config_file: Path) -> dict:
    """Read config.yaml, writing the defaults when it does not exist."""
    if not config_file.exists():
        try:
            with open(config_file, "w") as f:
                yaml.dump(DEFAULT_CONFIG, f)
            print(f"Created default configuration: {config_file}")
        except OSError as e:
            print(f"Warning: Could not create config file: {e}")
        return dict(DEFAULT_CONFIG)

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"Warning: Could not read config file: {e}")
        return dict(DEFAULT_CONFIG)

    # Merge with defaults to ensure all keys exist
    return {**DEFAULT_CONFIG, **config}


def main():
    root_dir = Path(__file__).parent.resolve()
    backend_dir = root_dir / "backend"

    config = load_config(root_dir / "config.yaml")

    parser = argparse.ArgumentParser(description="Kea Config Panel Development Server")
    parser.add_argument("--host", default=config["host"], help=f"Host to bind (default: {config['host']})")
    parser.add_argument("--port", "-p", type=int, default=config["port"], help=f"Port to bind (default: {config['port']})")
    parser.add_argument("--reload", "-r", action="store_true", help="Enable auto-reload")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    # Settings are read from the environment on import
    if args.debug:
        os.environ["KEA_DEBUG"] = "true"
    if config.get("database_url"):
        os.environ.setdefault("KEA_DATABASE_URL", config["database_url"])

    os.chdir(backend_dir)
    sys.path.insert(0, str(backend_dir))

    print("=" * 50)
    print("Kea Config Panel Development Server")
    print("=" * 50)
    print(f"  Host: {args.host}")
    print(f"  Port: {args.port}")
    print(f"  Reload: {args.reload}")
    print(f"  Debug: {args.debug}")
    print("=" * 50)
    print(f"\n  → http://{args.host}:{args.port}/docs (Swagger UI)")
    print("\n  Press Ctrl+C to stop\n")

    import uvicorn
    try:
        uvicorn.run(
            "kea_config.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
            access_log=True,
            use_colors=False,
        )
    except KeyboardInterrupt:
        pass

    print("\nStopped.")


if __name__ == "__main__":
    main()
