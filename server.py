#!/usr/bin/env python3
import os
import webbrowser

import uvicorn
from dotenv import load_dotenv

from logging_setup import setup_logging

load_dotenv()

HOST      = os.getenv("TODO_HOST", "127.0.0.1")
PORT      = int(os.getenv("TODO_PORT", "3000"))
LOG_LEVEL = os.getenv("TODO_LOG_LEVEL", "INFO")
OPEN_BROWSER = os.getenv("TODO_OPEN_BROWSER", "") == "1"


def main():
    setup_logging(LOG_LEVEL)
    print(f"Server is running on http://localhost:{PORT}")
    if OPEN_BROWSER:
        webbrowser.open(f"http://localhost:{PORT}")
    uvicorn.run("app:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
