"""CSV and JSON export of report tables."""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from utils.logger import setup_logger
import config

logger = setup_logger(__name__)


class ReportExporter:
    """Writes report tables into one output directory."""

    def __init__(self, output_dir: Path = config.OUTPUT_DIR):
        """Initialize exporter.

        Args:
            output_dir: Directory for CSV and JSON files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.written: List[Path] = []

    def export_table(self, name: str, df: pd.DataFrame) -> Path:
        """Save a DataFrame as ``<name>.csv``."""
        path = self.output_dir / f"{name}.csv"
        df.to_csv(path, index=False, encoding='utf-8')
        self.written.append(path)
        logger.info(f"Exported {len(df)} rows to {path.name}")
        return path

    def export_summary(self, summary: Dict[str, Any]) -> Path:
        """Save run metadata as ``run_summary.json``."""
        path = self.output_dir / "run_summary.json"
        data = dict(summary)
        data.setdefault('generated_at', datetime.now(timezone.utc).isoformat())
        data['files'] = [p.name for p in self.written]

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Exported run summary to {path.name}")
        return path
