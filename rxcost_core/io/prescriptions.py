from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from rxcost_core.domain.models import Prescription


REQUIRED_COLUMNS = {"medicine_name", "dosage", "frequency", "monthly_cost", "disease_type"}


def load_prescriptions(csv_path: str | Path) -> List[Prescription]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip().lower() for c in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in prescriptions CSV: {missing}")

    costs = pd.to_numeric(df["monthly_cost"], errors="coerce")
    bad = df.index[costs.isna()].tolist()
    if bad:
        raise ValueError(f"Non-numeric monthly_cost on CSV rows: {[i + 2 for i in bad]}")

    entries: List[Prescription] = []
    for (_, row), cost in zip(df.iterrows(), costs):
        entries.append(
            Prescription(
                medicine_name=str(row["medicine_name"]).strip(),
                dosage=str(row["dosage"]).strip(),
                frequency=str(row["frequency"]).strip(),
                monthly_cost=float(cost),
                disease_type=str(row["disease_type"]).strip(),
            )
        )
    return entries
