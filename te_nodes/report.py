import csv
import os

from .updater import UpdateReport

CSV_FIELDS = ["id", "name", "old_description", "new_description", "status", "error"]


def write_csv(report: UpdateReport, path: str) -> None:
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(CSV_FIELDS)
        for r in report.results:
            w.writerow([
                r.node_id,
                r.name or "",
                r.old_description or "",
                r.new_description,
                r.status,
                r.error or "",
            ])
