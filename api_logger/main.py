import logging
import os
import platform
import subprocess
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI

from api_logger.container import (
    get_attempt_log_store,
    get_payload_store,
    get_public_api_client,
)
from api_logger.core.middleware import apply_cors
from api_logger.routes import api_router, health_router

logger = logging.getLogger(__name__)

# Track Celery subprocesses for cleanup
_celery_processes: List[subprocess.Popen] = []

# Project root (parent of the api_logger package)
_PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _start_celery_process(args: List[str], label: str) -> Optional[subprocess.Popen]:
    """Start a Celery worker or beat as a subprocess."""
    is_windows = platform.system() == "Windows"
    cmd = [sys.executable, "-m", "celery", "-A", "api_logger.celery_app", *args]

    try:
        kwargs = {"cwd": _PROJECT_DIR}
        if is_windows:
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP

        # Output is inherited; an unread pipe would block the child once full
        process = subprocess.Popen(cmd, **kwargs)
        logger.info(f"Celery {label} started (PID: {process.pid})")
        return process
    except Exception as e:
        logger.error(f"Failed to start Celery {label}: {e}")
        return None


def _start_celery_worker() -> Optional[subprocess.Popen]:
    pool_type = "solo" if platform.system() == "Windows" else "prefork"
    return _start_celery_process(
        ["worker", f"--pool={pool_type}", "-Q", "polling,default", "-l", "info", "--concurrency=2"],
        "worker",
    )


def _start_celery_beat() -> Optional[subprocess.Popen]:
    return _start_celery_process(["beat", "-l", "info"], "Beat")


def _stop_celery_processes():
    """Stop all Celery subprocesses."""
    import signal

    for process in _celery_processes:
        if process and process.poll() is None:
            try:
                logger.info(f"Stopping Celery process (PID: {process.pid})...")
                if platform.system() == "Windows":
                    process.terminate()
                else:
                    process.send_signal(signal.SIGTERM)
                process.wait(timeout=10)
                logger.info(f"Celery process {process.pid} stopped")
            except subprocess.TimeoutExpired:
                logger.warning(f"Force killing Celery process {process.pid}")
                process.kill()
            except Exception as e:
                logger.error(f"Error stopping Celery process: {e}")

    _celery_processes.clear()


async def _ensure_stores() -> None:
    """Create the payload bucket and verify the attempt log table."""
    for name, getter in (("attempt log", get_attempt_log_store), ("payload", get_payload_store)):
        try:
            await getter().ensure_exists()
        except Exception as e:
            logger.warning(f"{name} store not ready: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    On startup:
    - Ensure the attempt log table and payload bucket exist
    - Start Celery worker and Beat subprocesses (unless AUTO_START_CELERY=false)

    On shutdown:
    - Stop Celery subprocesses
    - Close the shared public API HTTP client
    """
    logger.info("=== API Logger Starting ===")

    await _ensure_stores()

    auto_start_celery = os.getenv("AUTO_START_CELERY", "true").lower() == "true"

    if auto_start_celery:
        worker_process = _start_celery_worker()
        if worker_process:
            _celery_processes.append(worker_process)

        import asyncio
        await asyncio.sleep(2)

        beat_process = _start_celery_beat()
        if beat_process:
            _celery_processes.append(beat_process)

        logger.info(f"Started {len(_celery_processes)} Celery processes")
    else:
        logger.info("Celery auto-start disabled (AUTO_START_CELERY=false)")

    logger.info("=== API Logger Ready ===")

    yield

    logger.info("=== API Logger Shutting Down ===")

    if _celery_processes:
        _stop_celery_processes()

    await get_public_api_client().aclose()

    logger.info("Shutdown complete")


app = FastAPI(title="API Logger", lifespan=lifespan)
logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

apply_cors(app)

app.include_router(health_router)
app.include_router(api_router)
