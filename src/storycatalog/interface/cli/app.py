from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration loading,
registration of the story batches, the requested selection and navigation
steps, and rendering of the outcome (human summary or JSON).
"""

import json
import sys
from typing import Any, Dict, List, Mapping, Optional

from storycatalog.core.services.stories import StoriesApi
from storycatalog.domain.catalog_models import RegistrationResult, Selection
from storycatalog.domain.config import get_default_config, load_config
from storycatalog.infra.fs import read_json
from storycatalog.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
)
from storycatalog.infra.routing import MemoryRouter
from storycatalog.infra.store import Store
from storycatalog.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 2 for unreadable or malformed input, 1 otherwise.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Configuration
    config = get_default_config() if args.use_defaults else load_config()

    # 2. Logging bootstrap
    log_settings = config.get("logging", {})
    log_file = args.log_file
    if not log_file and log_settings.get("log_to_file"):
        log_file = get_default_log_path()
    level = "DEBUG" if args.debug else str(log_settings.get("level", "INFO"))
    configure_logging(LoggingConfig(level=level, console=True, log_file=log_file))

    if args.dump_config:
        print(json.dumps(config, ensure_ascii=False, indent=2))
        return 0

    # 3. Load batches before touching the catalog
    try:
        batches = [_load_batch(path) for path in args.batches]
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read story batch: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    store = Store()
    router = MemoryRouter(store)
    view_mode = args.view_mode or config.get("navigation", {}).get("default_view_mode")
    api = StoriesApi.create(
        config,
        store=store,
        navigate=router.navigate,
        initial_selection=Selection(story_id=None, view_mode=view_mode),
    )

    # 4. Registration, selection and navigation
    try:
        results = [api.set_stories(batch) for batch in batches]
        _apply_selection(api, args)
        parameters = None
        if args.parameters_id:
            parameters = api.get_parameters(args.parameters_id, args.parameter_name)
    except ValueError as e:
        logger.error(f"Invalid story batch: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 5. Output
    if args.json_output:
        print(json.dumps(
            _build_report(api, router, results, parameters, args),
            ensure_ascii=False, indent=2, default=_json_default,
        ))
    else:
        _print_human_summary(api, router, results, parameters, args)

    return 0

# -----------------------------------------------------------------------------
# WORKFLOW HELPERS
# -----------------------------------------------------------------------------

def _load_batch(path: str) -> Mapping[str, Any]:
    """Read a batch file, unwrapping a {"stories": {...}} payload."""
    data = read_json(path)
    if isinstance(data, dict) and isinstance(data.get("stories"), dict):
        data = data["stories"]
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object of stories")
    return data


def _apply_selection(api: StoriesApi, args: Any) -> None:
    if args.select_id:
        api.select_story(args.select_id)
    if args.name:
        api.select_story(args.kind, args.name)

    jump = cli_args.parse_jump(args.jump)
    if jump is None:
        return

    target, direction = jump
    move = api.jump_to_story if target == "story" else api.jump_to_component
    for _ in range(args.times):
        if move(direction) is None:
            break

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _build_report(
        api: StoriesApi,
        router: MemoryRouter,
        results: List[RegistrationResult],
        parameters: Any,
        args: Any,
) -> Dict[str, Any]:
    selection = api.selection
    report: Dict[str, Any] = {
        "stories_hash": {
            key: dict(entry.to_dict(), type=entry.node_type.value)
            for key, entry in api.stories_hash.items()
        },
        "selection": {"story_id": selection.story_id, "view_mode": selection.view_mode},
        "history": list(router.history),
        "anomalies": [
            {"path": a.path, "kept": a.kept, "discarded": a.discarded}
            for result in results for a in result.anomalies
        ],
    }
    if args.parameters_id:
        report["parameters"] = parameters
    return report


def _print_human_summary(
        api: StoriesApi,
        router: MemoryRouter,
        results: List[RegistrationResult],
        parameters: Any,
        args: Any,
) -> None:
    for index, result in enumerate(results, start=1):
        print(
            f"Batch {index}: {len(result.added_stories)} new stories "
            f"({result.stories_count} stories, {result.groups_count} groups)"
        )
        for anomaly in result.anomalies:
            print(f"  ! conflict at {anomaly.path}: kept {anomaly.kept!r}")

    selection = api.selection
    print(f"Selected: {selection.story_id or '-'} (view: {selection.view_mode or '-'})")

    if router.history:
        print("Navigation:")
        for path in router.history:
            print(f"  -> {path}")

    if args.parameters_id:
        print(f"Parameters of {args.parameters_id}:")
        print(json.dumps(parameters, ensure_ascii=False, indent=2, default=_json_default))


def _json_default(value: Any) -> Any:
    # Compiled separators and other opaque parameter values
    pattern = getattr(value, "pattern", None)
    if isinstance(pattern, str):
        return pattern
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return repr(value)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
