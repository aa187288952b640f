"""Per-workspace fan-out."""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Optional, TypeVar

from .models import Workspace

T = TypeVar("T")


def for_each_workspace(workspaces: Dict[str, Workspace],
                       fn: Callable[[Workspace], T],
                       max_jobs: int = 1) -> Dict[str, T]:
    """
    Run ``fn`` for every workspace and collect the results by name.

    Workspaces are independent of each other within a phase, so with
    ``max_jobs > 1`` they are processed on a thread pool. Every submitted
    call finishes before the first failure, if any, is re-raised.

    Args:
        workspaces: Workspaces to process
        fn: Callable taking one Workspace
        max_jobs: Maximum number of workspaces processed at once

    Returns:
        Dictionary mapping workspace names to the results of ``fn``
    """
    if max_jobs <= 1 or len(workspaces) <= 1:
        return {name: fn(workspace) for name, workspace in workspaces.items()}

    results: Dict[str, T] = {}
    first_error: Optional[BaseException] = None
    with ThreadPoolExecutor(max_workers=max_jobs) as executor:
        future_to_name = {
            executor.submit(fn, workspace): name
            for name, workspace in workspaces.items()
        }
        for future in as_completed(future_to_name):
            error = future.exception()
            if error is not None:
                if first_error is None:
                    first_error = error
                continue
            results[future_to_name[future]] = future.result()

    if first_error is not None:
        raise first_error

    # Keep the workspace order of the input mapping
    return {name: results[name] for name in workspaces}
