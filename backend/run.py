"""
Run the helpdesk field engine API with uvicorn.

Usage:
    python run.py
    python run.py --reload    # Development mode with auto-reload
    python run.py --port 8080 # Custom port
"""
import argparse
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the Helpdesk Field Engine API server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    args = parser.parse_args()

    print(f"Starting Helpdesk Field Engine on {args.host}:{args.port} (reload={args.reload})")

    uvicorn.run(
        "helpdesk.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )


if __name__ == "__main__":
    main()
