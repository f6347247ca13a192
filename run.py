#!/usr/bin/env python3
"""
Credit Due Engine Entry Point

Starts the FastAPI server with the credit engine, using the host and port
from CREDIT_ENGINE_API_HOST / CREDIT_ENGINE_API_PORT.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from credit_engine.api import run_server
from credit_engine.config import get_config


if __name__ == "__main__":
    engine_config = get_config()
    print("Starting Credit Due Engine...")
    print(f"API available at: http://localhost:{engine_config.api_port}")
    print(f"Documentation at: http://localhost:{engine_config.api_port}/docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\nShutting down Credit Due Engine...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
