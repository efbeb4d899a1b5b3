import json
import pandas as pd
from io import BytesIO
from typing import IO, List, Tuple, Union
from pathlib import Path
from pydantic import ValidationError
from config.paths import DATA_DIR, OUTPUT_DIR
from exceptions.custom_errors import FileContentError, FileReadingError
from schemas.schedule.generate import NurseProfile, ScheduleRequest
from schemas.schedule.roster import MaterializedSchedule


def load_schedule_request(path: Union[str, Path, None] = None) -> ScheduleRequest:
    """
    Load a scheduling request from a JSON file.

    Parameters:
        path: Path to the JSON file. Defaults to 'data/schedule_request.json'.

    Returns:
        ScheduleRequest: The parsed request.
    """
    if path is None:
        path = DATA_DIR / "schedule_request.json"

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise FileReadingError(f"Error loading schedule request: {e}")

    try:
        return ScheduleRequest.model_validate(raw)
    except ValidationError as e:
        raise FileContentError(f"Invalid schedule request in {path}: {e}")


def split_list(value) -> List[str]:
    """Split a comma/semicolon separated cell into a clean list."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [v.strip() for v in str(value).replace(";", ",").split(",") if v.strip()]


def load_nurse_profiles(
    path_or_buffer: Union[str, Path, bytes, IO, None] = None,
    drop_duplicates: bool = True,
) -> List[NurseProfile]:
    """
    Load nurse profiles flexibly by matching columns containing 'id', 'name', 'role',
    'qualification' and optionally 'code' and 'ward'.

    Parameters:
        path_or_buffer: Path to an Excel or CSV file, or a file-like object. Defaults to 'data/nurse_profiles.xlsx'.
        drop_duplicates: Remove duplicate ids if True, otherwise raise.

    Returns:
        List[NurseProfile]: Nurses with default availability and working constraints.
    """
    if path_or_buffer is None:
        path_or_buffer = DATA_DIR / "nurse_profiles.xlsx"

    try:
        if isinstance(path_or_buffer, (str, Path)) and str(path_or_buffer).lower().endswith(".csv"):
            df = pd.read_csv(path_or_buffer)
        else:
            if isinstance(path_or_buffer, bytes):
                path_or_buffer = BytesIO(path_or_buffer)
            df = pd.read_excel(path_or_buffer)
    except Exception as e:
        raise FileReadingError(f"Error loading nurse profiles: {e}")

    col_map = {str(col).lower().strip(): col for col in df.columns}

    def find_col(*keywords: str, required: bool = True):
        """Find column matching any of the keywords, exact match first."""
        for k in keywords:
            if k in col_map:
                return col_map[k]
        for key, original in col_map.items():
            if any(k in key for k in keywords):
                return original
        if required:
            raise FileContentError(f"No column found containing {keywords}")
        return None

    id_col = find_col("id")
    name_col = find_col("name")
    role_col = find_col("role", "title", required=False)
    qual_col = find_col("qualification", required=False)
    code_col = find_col("code", required=False)
    ward_col = find_col("ward", required=False)

    df = df.dropna(subset=[id_col, name_col]).copy()
    df[id_col] = df[id_col].astype(str).str.strip()

    if df.duplicated(subset=[id_col]).any():
        if drop_duplicates:
            df = df.drop_duplicates(subset=[id_col])
        else:
            raise FileContentError(
                f"Duplicate nurse ids found: {df.loc[df.duplicated(subset=[id_col]), id_col].tolist()}"
            )

    nurses = []
    for _, row in df.iterrows():
        record = {
            "id": row[id_col],
            "name": str(row[name_col]).strip(),
            "qualifications": split_list(row[qual_col]) if qual_col else [],
        }
        if role_col and pd.notna(row[role_col]):
            record["role"] = str(row[role_col]).strip().lower()
        if code_col and pd.notna(row[code_col]):
            record["code"] = str(row[code_col]).strip()
        if ward_col:
            record["wardAccess"] = split_list(row[ward_col]) or ["all"]
        try:
            nurses.append(NurseProfile.model_validate(record))
        except ValidationError as e:
            raise FileContentError(f"Invalid nurse row '{record['id']}': {e}")
    return nurses


def schedule_to_frames(result: MaterializedSchedule) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Flatten a materialized schedule into an assignment table (one row per
    nurse-shift) and a per-nurse summary table.
    """
    rows = []
    for day, day_schedule in result.schedule.items():
        for ward_id, ward_day in day_schedule.wards.items():
            for shift, slot in ward_day.shifts.items():
                for a in slot.nurses:
                    rows.append(
                        {
                            "date": day,
                            "dayOfWeek": day_schedule.dayOfWeek,
                            "wardId": ward_id,
                            "wardName": ward_day.wardName,
                            "shift": shift.value,
                            "nurseId": a.nurseId,
                            "nurseName": a.nurseName,
                            "role": a.role,
                            "hours": a.hours,
                            "overtime": a.overtime,
                            "preferred": a.preferred,
                            "coverage": slot.coverage,
                        }
                    )
    assignments_df = pd.DataFrame(
        rows,
        columns=[
            "date", "dayOfWeek", "wardId", "wardName", "shift", "nurseId",
            "nurseName", "role", "hours", "overtime", "preferred", "coverage",
        ],
    )

    summary_rows = []
    for stats in result.nurseStats.values():
        row = stats.model_dump(exclude={"shiftDistribution"})
        for shift, count in stats.shiftDistribution.items():
            row[f"{shift.value.lower()}Shifts"] = count
        summary_rows.append(row)
    summary_df = pd.DataFrame(summary_rows)
    if not summary_df.empty:
        summary_df = summary_df.set_index("nurseId")
    return assignments_df, summary_df


def export_schedule_excel(
    result: MaterializedSchedule, path: Union[str, Path, IO, None] = None
) -> Union[str, Path, IO]:
    """
    Write the assignment table, the nurse summary and the violation list to an
    Excel workbook. Defaults to 'output/schedule.xlsx'.
    """
    if path is None:
        OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        path = OUTPUT_DIR / "schedule.xlsx"

    assignments_df, summary_df = schedule_to_frames(result)
    violations_df = pd.DataFrame(
        [
            {
                "date": v.date,
                "type": v.type.value,
                "severity": v.severity.value,
                "nurseId": v.nurseId,
                "wardId": v.wardId,
                "shift": v.shift.value if v.shift else None,
                "description": v.description,
            }
            for v in result.quality.violations
        ],
        columns=["date", "type", "severity", "nurseId", "wardId", "shift", "description"],
    )

    with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
        assignments_df.to_excel(writer, sheet_name="Assignments", index=False)
        summary_df.to_excel(writer, sheet_name="Nurse Summary", index=not summary_df.empty)
        violations_df.to_excel(writer, sheet_name="Violations", index=False)
    return path
