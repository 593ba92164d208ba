import logging
from typing import Union

import numpy as np
import pandas as pd

from ..models.schemas import SalesRecord

logger = logging.getLogger(__name__)


def _to_frame(text: str) -> pd.DataFrame:
    rows = [line for line in text.split("\n") if line.strip()]
    fields = []
    for row in rows[1:]:  # first non-blank line is the header
        values = row.split(",")
        fields.append(
            (values[0].strip(), values[1].strip() if len(values) > 1 else "")
        )
    return pd.DataFrame(fields, columns=["date", "sales"], dtype=str)


def parse_sales_csv(content: Union[str, bytes]) -> list[SalesRecord]:
    """Parse ``date,sales`` CSV text, silently dropping rows that don't parse.

    Dates must be ISO ``YYYY-MM-DD``; sales must be a finite number. Row order
    is preserved.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    df = _to_frame(content)
    if df.empty:
        return []

    df["Date"] = pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")
    df["Sales"] = pd.to_numeric(df["sales"], errors="coerce")
    keep = df["Date"].notna() & np.isfinite(df["Sales"])
    dropped = int((~keep).sum())
    if dropped:
        logger.debug(f"Dropped {dropped} malformed rows")

    df = df.loc[keep]
    return [
        SalesRecord(date=d.date(), sales=float(s))
        for d, s in zip(df["Date"], df["Sales"])
    ]
