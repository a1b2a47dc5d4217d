"""
Runs the resume builder API locally.

Run `python run_server_local.py` in the terminal to launch the server and
browse the swagger UI at `http://0.0.0.0:8001/docs`. Set `DATABASE_URL`
(or add it to `.env`) to point the server at another database.
"""
import signal
import sys

import uvicorn

from resume_builder.logging import LoggerFactory

logger = LoggerFactory().get_logger(
    name="run_server_local",
    logger_type="api",
    console=True
)


def main():
    # Use Uvicorn programmatically for proper cleanup on Ctrl+C
    config = uvicorn.Config(
        "api.server:app",
        host="0.0.0.0",
        port=8001,
        reload=True
    )
    server = uvicorn.Server(config)

    def handle_exit(sig, frame):
        logger.info("Shutting down gracefully...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_exit)
    signal.signal(signal.SIGTERM, handle_exit)

    server.run()
    logger.info("Server stopped cleanly.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received. Exiting...")
        sys.exit(0)
