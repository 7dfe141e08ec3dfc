from __future__ import annotations

import logging
import re

import pandas as pd
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from census_scatter.db import get_engine
from census_scatter.metrics import NUMERIC_COLUMNS, REQUIRED_COLUMNS
from census_scatter.settings import Settings

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class DatasetLoadError(RuntimeError):
    """The census dataset could not be read."""


# ============================================================
# Core Utility
# ============================================================

def run_query(query: str, engine) -> pd.DataFrame:
    """Executes a SQL query and returns a pandas DataFrame."""
    with engine.connect() as conn:
        return pd.read_sql(text(query), conn)


def coerce_census_frame(df: pd.DataFrame, source: str = "dataset") -> pd.DataFrame:
    """
    Checks the required columns and converts the metric columns to float.
    Values that don't parse become NaN; nothing is dropped.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DatasetLoadError(f"{source} is missing columns: {', '.join(missing)}")

    out = df.copy()
    for col in NUMERIC_COLUMNS:
        out[col] = pd.to_numeric(out[col], errors="coerce").astype(float)
    out["state"] = out["state"].astype(str)
    out["abbr"] = out["abbr"].astype(str)

    bad = int(out[list(NUMERIC_COLUMNS)].isna().sum().sum())
    if bad:
        logger.debug("%s: %d metric value(s) are not numeric", source, bad)
    return out.reset_index(drop=True)


# ============================================================
# Dataset Sources
# ============================================================

def load_census_csv(path: str) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    # ParserError, EmptyDataError and UnicodeDecodeError are all ValueErrors.
    except (OSError, ValueError) as exc:
        raise DatasetLoadError(f"Could not read {path}: {exc}") from exc
    return coerce_census_frame(df, source=path)


def load_census_table(table: str, engine) -> pd.DataFrame:
    if not _TABLE_NAME.match(table):
        raise DatasetLoadError(f"Invalid table name: {table!r}")
    query = f"""
        SELECT *
        FROM {table};
    """
    try:
        df = run_query(query, engine)
    except (SQLAlchemyError, pd.errors.DatabaseError) as exc:
        raise DatasetLoadError(f"Could not query {table}: {exc}") from exc
    return coerce_census_frame(df, source=table)


def load_dataset(settings: Settings) -> pd.DataFrame:
    """Loads the census dataset from the configured table or CSV file."""
    if settings.uses_database:
        logger.info("Loading census data from table %s", settings.data_table)
        try:
            engine = get_engine(settings.database_url)
        except (SQLAlchemyError, ImportError) as exc:
            raise DatasetLoadError(f"Could not connect to the census database: {exc}") from exc
        return load_census_table(settings.data_table, engine)
    logger.info("Loading census data from %s", settings.data_path)
    return load_census_csv(settings.data_path)
