"""
Shift Loader - Imports shift records from CSV and JSON files.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from engine.base import GridComponent
from engine.time_grid import MalformedTimeError, time_to_minutes
from models.shift import Shift
from models.validation import validate_shift_record


@dataclass
class RejectedRecord:
    """A record that could not be turned into a Shift."""
    index: int
    record: Dict[str, Any]
    errors: List[str]


@dataclass
class LoadResult:
    """
    Outcome of an import.

    Attributes:
        shifts: Records accepted as shifts, in file order
        rejected: Records refused, with every error found
    """
    shifts: List[Shift] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected

    def summary(self) -> Dict[str, int]:
        return {"loaded": len(self.shifts), "rejected": len(self.rejected)}


class ShiftLoader(GridComponent):
    """
    Loads shift records at the edge of the engine.

    Responsibilities:
    - Parse CSV files (pandas) and JSON arrays
    - Accept both snake_case and portal record keys
    - Check every record before it becomes a Shift
    - Collect refused records instead of failing the whole import
    """

    def __init__(self, verbose: Optional[bool] = None):
        super().__init__("ShiftLoader", verbose=verbose)

    def load(self, path: Union[str, Path]) -> LoadResult:
        """
        Load shifts from a .csv or .json file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the extension is not supported
        """
        filepath = Path(path)
        if not filepath.exists():
            self.log(f"Shift file not found: {filepath}", "error")
            raise FileNotFoundError(filepath)

        suffix = filepath.suffix.lower()
        if suffix == ".csv":
            return self.load_csv(filepath)
        if suffix == ".json":
            return self.load_json(filepath)
        raise ValueError(f"Unsupported shift file type: {suffix}")

    def load_csv(self, path: Union[str, Path]) -> LoadResult:
        """Load shifts from a CSV file with one record per row."""
        # Keep every cell as text so times like 09:00 are not reinterpreted
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        df.columns = df.columns.str.strip()

        records = [
            {key: value.strip() for key, value in row.items()}
            for row in df.to_dict(orient="records")
        ]
        self.log(f"Read {len(records)} rows from {path}")
        return self.load_records(records)

    def load_json(self, path: Union[str, Path]) -> LoadResult:
        """Load shifts from a JSON file holding an array of records."""
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        return self.load_records(self.parse_json(text))

    @staticmethod
    def parse_json(text: str) -> List[Dict[str, Any]]:
        """
        Parse a JSON document into a list of records.

        Raises:
            ValueError: If the text is not JSON or not an array
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON: {e}") from e
        if not isinstance(data, list):
            raise ValueError("Invalid JSON format - expected an array")
        return data

    def load_records(self, records: Iterable[Dict[str, Any]]) -> LoadResult:
        """
        Turn raw records into shifts.

        Records without an id get a fresh one. A record is refused when it
        fails the record check, names an impossible clock time or repeats an
        id already loaded.

        Args:
            records: Raw records (dicts)

        Returns:
            LoadResult with accepted shifts and refused records
        """
        result = LoadResult()
        seen_ids = set()

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                result.rejected.append(RejectedRecord(index, {"value": record},
                                                      ["Record must be an object"]))
                continue

            errors = self._check(record)
            shift = None
            if not errors:
                data = dict(record)
                if not (data.get("id") or data.get("$id")):
                    data["id"] = Shift.new_id()
                try:
                    shift = Shift.from_dict(data)
                except ValueError:
                    errors.append("Invalid date format (use YYYY-MM-DD)")

            if shift is not None and shift.id in seen_ids:
                errors.append(f"Duplicate shift id: {shift.id}")

            if errors:
                result.rejected.append(RejectedRecord(index, record, errors))
                self.log(f"Record {index} refused: {'; '.join(errors)}", "warning")
                continue

            seen_ids.add(shift.id)
            result.shifts.append(shift)

        self.log(
            f"Import complete: {len(result.shifts)} shifts, {len(result.rejected)} refused",
            "success" if result.ok else "warning",
        )
        return result

    def _check(self, record: Dict[str, Any]) -> List[str]:
        check = validate_shift_record(record)
        if not check.valid:
            return list(check.errors)

        # Well-formed HH:MM can still be an impossible time such as 25:00
        errors = []
        for label, keys in (("start", ("start_time", "startTime")),
                            ("end", ("end_time", "endTime"))):
            value = next(str(record[k]) for k in keys if record.get(k))
            try:
                time_to_minutes(value)
            except MalformedTimeError:
                errors.append(f"Invalid {label} time format (use HH:MM)")
        return errors
