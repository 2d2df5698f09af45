"""
Main runner for cubecover.

This module turns a Config into pieces, runs the solver, and records the
outcome through the console display and the run logger.
"""

import os
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from cubecover.core import Config
from cubecover.core.base import (
    InvalidInputError, Piece, SearchInterrupted, SolveReport, SolveStatus,
)
from cubecover.core.catalog import SOMA_PIECES, load_catalog, select_pieces
from cubecover.solver.pipeline import make_stop_check, solve_with_stats, verify_solution
from cubecover.utils.logger import ExperimentLogger
from cubecover.utils.display import StatusDisplay, LiveLogger


class SolveRunner:
    """Runs solves for one configuration."""

    def __init__(self, config: Config, verbose: Optional[bool] = None):
        self.config = config
        self.logger = ExperimentLogger(
            log_dir=config.runner.log_dir,
            experiment_name=config.runner.experiment_name,
            create_dirs=False,
        )
        self.catalog: Optional[Dict[str, Piece]] = None
        self.pieces: Optional[List[Piece]] = None

        if verbose is None:
            verbose = config.runner.verbose
        self.live_logger = LiveLogger(verbose=verbose)

    def setup(self) -> None:
        """Load the catalog and resolve the configured selection."""
        if self.config.runner.save_logs:
            os.makedirs(self.config.runner.log_dir, exist_ok=True)

        if self.config.selection.catalog_path:
            self.catalog = load_catalog(self.config.selection.catalog_path)
        else:
            self.catalog = dict(SOMA_PIECES)

        self.pieces = select_pieces(
            self.config.selection.pieces,
            base_piece=self.config.selection.base_piece,
            catalog=self.catalog,
        )
        self.live_logger.log_info(
            f"Selection ready: {' '.join(p.name for p in self.pieces)} "
            f"on a {self._size_label()} cube"
        )

    def _size_label(self) -> str:
        n = self.config.solver.cube_size
        return f"{n}x{n}x{n}"

    def _validate_components(self) -> None:
        if self.pieces is None:
            raise RuntimeError("Runner not properly initialized. Call setup() first.")

    def solve_selection(self, pieces: Sequence[Piece], run_id: str = "run_0") -> SolveReport:
        """
        Solve one piece list without printing. Safe to call from worker threads.

        Unsolvable, malformed and interrupted requests all come back as
        reports; only unexpected exceptions propagate.
        """
        cube_size = self.config.solver.cube_size
        names = [p.name for p in pieces]
        start = time.time()
        should_stop = make_stop_check(self.config.solver.max_nodes, self.config.solver.time_limit)

        try:
            outcome = solve_with_stats(pieces, cube_size, should_stop)
        except InvalidInputError as e:
            return SolveReport(run_id=run_id, pieces=names, cube_size=cube_size,
                               status=SolveStatus.INVALID, execution_time=time.time() - start,
                               error_message=str(e))
        except SearchInterrupted as e:
            return SolveReport(run_id=run_id, pieces=names, cube_size=cube_size,
                               status=SolveStatus.INTERRUPTED, execution_time=time.time() - start,
                               error_message=str(e))

        metadata = {
            "rows": outcome.num_rows,
            "columns": outcome.num_columns,
            **outcome.stats.to_dict(),
        }
        if outcome.placements is None:
            status = SolveStatus.NO_SOLUTION
        else:
            problems = verify_solution(pieces, cube_size, outcome.placements)
            if problems:
                return SolveReport(run_id=run_id, pieces=names, cube_size=cube_size,
                                   status=SolveStatus.ERROR, execution_time=time.time() - start,
                                   placements=outcome.placements, metadata=metadata,
                                   error_message="; ".join(problems))
            status = SolveStatus.SOLVED

        return SolveReport(
            run_id=run_id,
            pieces=names,
            cube_size=cube_size,
            status=status,
            execution_time=time.time() - start,
            placements=outcome.placements,
            metadata=metadata,
        )

    def run(self) -> SolveReport:
        """Solve the configured selection and record the result."""
        self._validate_components()
        StatusDisplay.print_header(f"Solving {self._size_label()} cube")
        StatusDisplay.print_config({
            "Pieces": " ".join(p.name for p in self.pieces),
            "Total Volume": sum(p.volume for p in self.pieces),
            "Cube Volume": self.config.solver.cube_size ** 3,
            "Max Nodes": self.config.solver.max_nodes or "unbounded",
            "Time Limit": self.config.solver.time_limit or "unbounded",
        }, "Solve Configuration")

        self.live_logger.log_action("Building exact-cover matrix and searching")
        report = self.solve_selection(self.pieces, run_id=self.config.runner.experiment_name)
        self.logger.log_report(report)
        if report.metadata:
            self.logger.log_event("search", dict(report.metadata))

        self._print_report(report)
        if self.config.runner.save_logs:
            self._save(report)
        return report

    def run_in_background(self, executor: Optional[ThreadPoolExecutor] = None) -> "Future[SolveReport]":
        """
        Submit run() to a worker thread and return its Future.

        The search is not cancelable once started; configure max_nodes or
        time_limit to bound it.
        """
        self._validate_components()
        if executor is not None:
            return executor.submit(self.run)
        own = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cubecover")
        future = own.submit(self.run)
        own.shutdown(wait=False)
        return future

    def _print_report(self, report: SolveReport) -> None:
        results = {
            "Status": report.status.value,
            "Success": report.success,
            "Execution Time": f"{report.execution_time:.3f}s",
            "Matrix Rows": report.metadata.get("rows", 0),
            "Search Nodes": report.metadata.get("nodes", 0),
        }
        StatusDisplay.print_results(results, "Solve Results")

        if report.success:
            self.live_logger.log_result("Solution found")
            StatusDisplay.print_layers(report.placements, report.cube_size)
        elif report.status == SolveStatus.NO_SOLUTION:
            self.live_logger.log_warning("No solution exists for this combination")
        else:
            self.live_logger.log_error(f"Solve {report.status.value}: {report.error_message}")

    def _save(self, report: SolveReport) -> None:
        self.live_logger.log_action("Saving solve logs")
        log_file = self.logger.save_logs()
        if report.placements:
            self.logger.save_solution(report)
        self.live_logger.log_result(f"Logs saved to: {os.path.dirname(log_file)}")
