from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Sequence, TypeVar

from .config import ENV_PROGRESS, default_n_workers, env_flag
from .errors import InvalidArgument

T = TypeVar("T")


def resolve_n_workers(n_workers: int | None) -> int:
    if n_workers is None:
        return default_n_workers()
    n_workers = int(n_workers)
    if n_workers <= 0:
        raise InvalidArgument("n_workers must be positive.")
    return n_workers


def progress_enabled(progress: bool | None) -> bool:
    """Explicit `progress` wins; otherwise follow HALOPAINT_PROGRESS."""
    if progress is None:
        return env_flag(ENV_PROGRESS)
    return bool(progress)


def log_progress(tag: str, msg: str) -> None:
    try:
        print(f"[{tag}] {msg}", flush=True)
    except BrokenPipeError:
        # stdout went away (closed `tee`); keep the run alive.
        return


def run_tasks(tasks: Sequence[Callable[[], T]], *, n_workers: int | None = None) -> list[T]:
    """Run independent zero-argument tasks on a thread pool and join.

    Results are returned in task order. The first task to raise fails the whole
    call: tasks that have not started are cancelled and the exception is re-raised.
    With a single worker (or a single task) the tasks run inline.
    """
    n_workers = resolve_n_workers(n_workers)
    tasks = list(tasks)
    if not tasks:
        return []
    if n_workers == 1 or len(tasks) == 1:
        return [task() for task in tasks]

    with ThreadPoolExecutor(max_workers=min(n_workers, len(tasks))) as ex:
        futs = [ex.submit(task) for task in tasks]
        done, pending = wait(futs, return_when=FIRST_EXCEPTION)
        for fut in futs:
            if fut in done and fut.exception() is not None:
                for p in pending:
                    p.cancel()
                raise fut.exception()
        return [fut.result() for fut in futs]
