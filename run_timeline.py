"""CLI entry point for backtest timeline preparation.

Usage:
    python run_timeline.py sample --input timeline.json
    python run_timeline.py sample --input response.json --min-points 60 --strict-ceiling
    python run_timeline.py run --request request.json --base-url http://localhost:8001
"""

from src.backtest_timeline.cli import main

if __name__ == "__main__":
    main()
