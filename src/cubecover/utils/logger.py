import os
import json
import pandas as pd
from datetime import datetime
from typing import Any, Dict, List, Optional

from cubecover.core.base import SolveReport


class ExperimentLogger:
    def __init__(self, log_dir: str, experiment_name: str, create_dirs: bool = True):
        """
        Initializes the logger for one solve session.

        Args:
            log_dir (str): The base directory for logs.
            experiment_name (str): A name for the session; a timestamp is appended.
            create_dirs (bool): Create the run directory immediately.
        """
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.experiment_name = f"{experiment_name}_{self.timestamp}"
        self.run_dir = os.path.join(log_dir, self.experiment_name)
        self.logs: List[Dict[str, Any]] = []

        if create_dirs:
            os.makedirs(self.run_dir, exist_ok=True)

    def log_event(self, event_type: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Records one event (matrix built, search finished, error, ...).

        Args:
            event_type (str): Short event name, e.g. "matrix" or "search".
            data (Dict[str, Any]): Extra fields stored with the event.
        """
        entry = {"event": event_type, "timestamp": datetime.now().isoformat(), **(data or {})}
        self.logs.append(entry)
        return entry

    def log_report(self, report: SolveReport) -> None:
        self.log_event("report", {
            "run_id": report.run_id,
            "status": report.status.value,
            "pieces": list(report.pieces),
            "execution_time": report.execution_time,
            "error": report.error_message,
        })

    def save_logs(self) -> str:
        """Saves all collected events to a JSON file plus a text summary."""
        os.makedirs(self.run_dir, exist_ok=True)
        log_file = os.path.join(self.run_dir, "solve_log.json")
        with open(log_file, "w") as f:
            json.dump(self.logs, f, indent=2, default=str)

        self._create_summary_file(os.path.join(self.run_dir, "summary.txt"))
        return log_file

    def save_solution(self, report: SolveReport) -> str:
        """Writes a report (with placements) to solution.json for downstream renderers."""
        os.makedirs(self.run_dir, exist_ok=True)
        path = os.path.join(self.run_dir, "solution.json")
        with open(path, "w") as f:
            json.dump(report.to_dict(), f, indent=2)
        return path

    def _create_summary_file(self, summary_file: str):
        reports = [log for log in self.logs if log.get("event") == "report"]
        solved = [r for r in reports if r.get("status") == "solved"]
        errors = [log for log in self.logs if log.get("event") == "error"]

        with open(summary_file, "w") as f:
            f.write(f"Solve Summary: {self.experiment_name}\n")
            f.write("=" * 60 + "\n")
            f.write(f"Runs: {len(reports)}\n")
            f.write(f"Solved: {len(solved)}\n")
            f.write(f"Errors: {len(errors)}\n")
            f.write("\nRun breakdown:\n")
            f.write("-" * 30 + "\n")
            for r in reports:
                pieces = " ".join(r.get("pieces", []))
                f.write(f"{r.get('run_id', '?')}: {r.get('status')} [{pieces}] "
                        f"({r.get('execution_time', 0):.3f}s)\n")
                if r.get("error"):
                    f.write(f"  Error: {r['error']}\n")

    def save_results_table(self, reports: List[SolveReport], path: str) -> str:
        """
        Saves survey reports as a table. CSV or Excel is chosen by extension;
        an existing file is appended to.

        Args:
            reports (List[SolveReport]): Reports to store, one row each.
            path (str): Output path ending in .csv or .xlsx.
        """
        results_df = pd.DataFrame([r.to_row() for r in reports])
        excel = path.endswith(".xlsx")

        if os.path.exists(path):
            existing_df = pd.read_excel(path) if excel else pd.read_csv(path)
            results_df = pd.concat([existing_df, results_df], ignore_index=True)

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        if excel:
            results_df.to_excel(path, index=False)
        else:
            results_df.to_csv(path, index=False)
        return path
