"""
Runs the model trainer (train_model.py) as a child process.

The trainer talks back only through its exit code, its stderr, and the
JSON documents it rewrites (predicted, predicted_weekly, metrics_*).
"""
import asyncio
from dataclasses import dataclass
from typing import Optional, Set

from backend.config import get_settings
from backend.utils.logger import get_logger

logger = get_logger(__name__)

# Detached runs, kept referenced until they finish
_background_runs: Set[asyncio.Task] = set()


@dataclass
class TrainingResult:
    success: bool
    returncode: Optional[int] = None
    diagnostic: str = ""


def trainer_command() -> list[str]:
    settings = get_settings()
    return [
        settings.PYTHON_CMD,
        settings.TRAINER_SCRIPT,
        f"--episodes={settings.TRAINER_EPISODES}",
    ]


async def run_trainer() -> TrainingResult:
    """Run the trainer to completion. Never raises for process failures."""
    settings = get_settings()
    limit = settings.TRAINER_DIAGNOSTIC_LIMIT
    cmd = trainer_command()

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(settings.SERVER_ROOT),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await proc.communicate()
    except OSError as e:
        logger.error(f"Could not start model trainer ({' '.join(cmd)}): {e}")
        return TrainingResult(success=False, diagnostic=str(e)[:limit])

    error_text = (stderr or b"").decode("utf-8", errors="replace")
    if proc.returncode != 0:
        logger.error(f"Model training failed (exit {proc.returncode}): {error_text}")
        return TrainingResult(
            success=False,
            returncode=proc.returncode,
            diagnostic=error_text[:limit],
        )

    logger.info("Model training finished")
    return TrainingResult(success=True, returncode=0)


async def _run_and_log() -> Optional[TrainingResult]:
    try:
        result = await run_trainer()
    except Exception as e:
        logger.error(f"Background model training crashed: {e}")
        return None
    if not result.success:
        logger.warning(f"Background model training failed: {result.diagnostic}")
    return result


def launch_trainer() -> asyncio.Task:
    """Start a training run without waiting for it"""
    task = asyncio.create_task(_run_and_log())
    _background_runs.add(task)
    task.add_done_callback(_background_runs.discard)
    return task
