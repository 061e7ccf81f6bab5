#!/usr/bin/env python3
"""James OS - Run the dashboard API server.

Usage:
    python run.py
    # Or: python -m src.app

The API will be available at http://localhost:5050/api/logs
"""

from src.app import main

if __name__ == "__main__":
    main()
