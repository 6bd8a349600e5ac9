import argparse
import os

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the flat-file blog API server")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to run the server on (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port to run the server on (default: 3000)"
    )
    parser.add_argument(
        "--posts-file",
        help="Serve this posts file instead of picking one from POSTS_FILE_CANDIDATES"
    )
    parser.add_argument(
        "--serialize-reads",
        action="store_true",
        help="Queue reads behind pending writes for strict read-after-write"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (default: based on DEBUG setting)"
    )
    args = parser.parse_args()

    # The app reads its settings from the environment at import time
    if args.posts_file:
        os.environ["POSTS_FILE"] = args.posts_file
    if args.serialize_reads:
        os.environ["SERIALIZE_READS"] = "true"

    from app.core.config import Settings
    settings = Settings()
    use_reload = args.reload or settings.DEBUG

    if settings.DEBUG:
        print(f"Starting blog API in {settings.ENVIRONMENT} mode")
        print(f"Auto-reload: {'enabled' if use_reload else 'disabled'}")
        print(f"Server running at http://{args.host}:{args.port}")

    # A single worker: the write queue only orders writes within one process
    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=use_reload,
        workers=1,
    )


if __name__ == "__main__":
    main()
