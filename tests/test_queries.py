import math

import pandas as pd
import pytest
from sqlalchemy import create_engine

from census_scatter.queries import (
    DatasetLoadError,
    coerce_census_frame,
    load_census_csv,
    load_census_table,
    load_dataset,
)
from census_scatter.settings import Settings


def test_csv_metrics_are_floats_and_extra_columns_kept(census_csv):
    df = load_census_csv(str(census_csv))
    assert list(df["abbr"]) == ["AL", "AK", "AZ", "AR"]
    assert df["healthcare"].dtype == float
    assert df.loc[1, "healthcare"] == 15.0
    assert "povertyMoe" in df.columns


def test_unparseable_values_become_nan(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "state,abbr,poverty,age,income,healthcare,obesity\n"
        "Alabama,AL,n/a,38.6,,13.9,32.4\n"
    )
    df = load_census_csv(str(path))
    assert math.isnan(df.loc[0, "poverty"])
    assert math.isnan(df.loc[0, "income"])
    assert df.loc[0, "obesity"] == 32.4


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(DatasetLoadError):
        load_census_csv(str(tmp_path / "nope.csv"))


def test_empty_file_raises_load_error(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(DatasetLoadError):
        load_census_csv(str(path))


def test_missing_columns_are_reported():
    df = pd.DataFrame({"state": ["Alabama"], "abbr": ["AL"], "poverty": ["18.2"]})
    with pytest.raises(DatasetLoadError, match="age"):
        coerce_census_frame(df)


def test_load_dataset_reads_csv_by_default(settings):
    df = load_dataset(settings)
    assert len(df) == 4


def test_table_source(tmp_path, census_csv):
    engine = create_engine(f"sqlite:///{tmp_path / 'census.db'}")
    pd.read_csv(census_csv).to_sql("census", engine, index=False)

    df = load_census_table("census", engine)

    assert list(df["abbr"]) == ["AL", "AK", "AZ", "AR"]
    assert df.loc[0, "poverty"] == 18.2


def test_table_name_is_validated(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'census.db'}")
    with pytest.raises(DatasetLoadError, match="Invalid table name"):
        load_census_table("census; DROP TABLE census", engine)


def test_missing_table_raises_load_error(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'census.db'}")
    with pytest.raises(DatasetLoadError):
        load_census_table("census", engine)


def test_settings_pick_database_only_when_table_is_named():
    assert not Settings(database_url="sqlite://").uses_database
    assert Settings(database_url="sqlite://", data_table="census").uses_database


def test_invalid_utf8_raises_load_error(tmp_path):
    path = tmp_path / "binary.csv"
    path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(DatasetLoadError):
        load_census_csv(str(path))


def test_unparseable_database_url_raises_load_error():
    settings = Settings(database_url="not a url", data_table="census")
    with pytest.raises(DatasetLoadError, match="connect"):
        load_dataset(settings)
