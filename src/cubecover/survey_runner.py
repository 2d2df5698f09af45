"""Selection survey runner: solves many piece selections in parallel and tabulates them."""

from __future__ import annotations

import os
import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

from cubecover.core import Config
from cubecover.core.base import SolveReport, SolveStatus
from cubecover.core.catalog import SOMA_PIECES, load_catalog, select_pieces, selection_space
from cubecover.runner import SolveRunner
from cubecover.utils.display import ProgressDisplay, StatusDisplay


@dataclass
class SurveySummary:
    total_runs: int
    solved: int
    no_solution: int
    interrupted: int
    invalid: int
    errors: int
    solve_rate: float
    total_time: float
    avg_time_per_run: float
    total_nodes: int


def _summarize(reports: List[SolveReport]) -> SurveySummary:
    counts = {status: 0 for status in SolveStatus}
    for report in reports:
        counts[report.status] += 1
    total = len(reports)
    total_time = sum(r.execution_time for r in reports)
    return SurveySummary(
        total_runs=total,
        solved=counts[SolveStatus.SOLVED],
        no_solution=counts[SolveStatus.NO_SOLUTION],
        interrupted=counts[SolveStatus.INTERRUPTED],
        invalid=counts[SolveStatus.INVALID],
        errors=counts[SolveStatus.ERROR],
        solve_rate=counts[SolveStatus.SOLVED] / total if total else 0.0,
        total_time=total_time,
        avg_time_per_run=total_time / total if total else 0.0,
        total_nodes=sum(r.metadata.get("nodes", 0) for r in reports),
    )


def _print_summary(title: str, summary: SurveySummary) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("-" * 80)
    print(f"Runs: {summary.total_runs}, Solved: {summary.solved}, Solve rate: {summary.solve_rate:.2%}")
    print(f"No solution: {summary.no_solution}, Interrupted: {summary.interrupted}, "
          f"Invalid: {summary.invalid}, Errors: {summary.errors}")
    print(f"Total time: {summary.total_time:.2f}s, Avg/run: {summary.avg_time_per_run:.3f}s")
    print(f"Search nodes: {summary.total_nodes}")
    print("=" * 80)


def _save_summary_to_file(summary: SurveySummary, file_path: str) -> None:
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
    with open(file_path, "w") as f:
        json.dump(asdict(summary), f, indent=2, ensure_ascii=False)


def _run_selection(runner: SolveRunner, catalog, base_piece: str,
                   keys: Sequence[str], run_id: str) -> SolveReport:
    pieces = select_pieces(keys, base_piece=base_piece, catalog=catalog)
    report = runner.solve_selection(pieces, run_id=run_id)
    report.metadata["selection"] = list(keys)
    return report


def run_survey(
    config: Config,
    selections: Optional[List[Sequence[str]]] = None,
    max_workers: Optional[int] = None,
    show_progress: bool = True,
) -> List[SolveReport]:
    """
    Solve every selection (default: all selector multisets) and record the table.

    Args:
        config: Solver, selection and survey settings
        selections: Explicit list of piece-name tuples, base piece excluded
        max_workers: Overrides config.survey.max_workers
        show_progress: Print a progress line while solving

    Returns:
        Reports sorted by run id
    """
    if config.selection.catalog_path:
        catalog = load_catalog(config.selection.catalog_path)
    else:
        catalog = dict(SOMA_PIECES)

    if selections is None:
        selections = selection_space()
    if config.survey.limit is not None:
        selections = list(selections)[:config.survey.limit]

    workers = max_workers or config.survey.max_workers
    runner = SolveRunner(config, verbose=False)
    progress = ProgressDisplay(total=len(selections), enabled=show_progress)
    base_piece = config.selection.base_piece
    width = len(str(len(selections)))

    print(f"\nStarting survey of {len(selections)} selections with up to {workers} workers...")
    reports: List[SolveReport] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_run_selection, runner, catalog, base_piece, keys,
                            f"sel_{index:0{width}d}")
            for index, keys in enumerate(selections)
        ]
        for future in as_completed(futures):
            report = future.result()
            reports.append(report)
            progress.update(len(reports), f"{report.run_id} {report.status.value}")
    progress.finish(success=all(r.status != SolveStatus.ERROR for r in reports))

    reports.sort(key=lambda r: r.run_id)
    summary = _summarize(reports)
    _print_summary(f"Survey Summary ({config.solver.cube_size}x{config.solver.cube_size}x"
                   f"{config.solver.cube_size}, base {base_piece})", summary)

    if config.runner.save_logs:
        for report in reports:
            runner.logger.log_report(report)
        log_file = runner.logger.save_logs()
        run_dir = os.path.dirname(log_file)
        _save_summary_to_file(summary, os.path.join(run_dir, "survey_summary.json"))
        table_path = runner.logger.save_results_table(
            reports, os.path.join(run_dir, config.runner.results_path)
        )
        StatusDisplay.print_status(f"Survey table saved to: {table_path}", "success")

    return reports


def solvable_selections(reports: List[SolveReport]) -> List[Dict[str, Any]]:
    """Selections that produced a solution, with their run ids."""
    return [
        {"run_id": r.run_id, "selection": r.metadata.get("selection", r.pieces[1:])}
        for r in reports
        if r.status == SolveStatus.SOLVED
    ]
