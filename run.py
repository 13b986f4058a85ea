#!/usr/bin/env python3
"""
Financial Service Entry Point

Starts the FastAPI server with the transference ledger and review workflow.
"""

import sys

from financial_service.api import run_server
from financial_service.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting Financial Service...")
    print(f"Storage: {config.database_url}")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\nShutting down Financial Service...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
