"""
Entry point to run the alert digest worker (one run, or a loop when CHECK_INTERVAL > 0).
"""
import asyncio

from worker.main import main as worker_main


if __name__ == "__main__":
    asyncio.run(worker_main())
