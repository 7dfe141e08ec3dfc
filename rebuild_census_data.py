import os

import pandas as pd
import pycountry
import requests

# --------------------------------------------------
# ACS Variable IDs
# --------------------------------------------------
ACS_YEAR = os.getenv("ACS_YEAR", "2022")

DETAILED_VARS = {
    "B01002_001E": "age",          # Median age
    "B19013_001E": "income",       # Median household income
}
SUBJECT_VARS = {
    "S1701_C03_001E": "poverty",     # Percent below poverty level
    "S2701_C05_001E": "healthcare",  # Percent uninsured
}

PUERTO_RICO_FIPS = "72"

OBESITY_SOURCE = os.getenv("OBESITY_SOURCE", "data/obesity_by_state.csv")
OUTPUT_FILE = os.getenv("CENSUS_DATA_PATH", "data/data.csv")

# --------------------------------------------------
# Fetch state metrics from Census API
# --------------------------------------------------

def fetch_acs(endpoint, variables):
    url = f"https://api.census.gov/data/{ACS_YEAR}/acs/{endpoint}"
    params = {
        "get": ",".join(["NAME", *variables]),
        "for": "state:*",
    }
    response = requests.get(url, params=params, timeout=15)
    response.raise_for_status()
    data = response.json()
    df = pd.DataFrame(data[1:], columns=data[0]).rename(columns=variables)
    return df[df["state"] != PUERTO_RICO_FIPS]


print(f"Fetching ACS {ACS_YEAR} state metrics from Census API...")

detailed = fetch_acs("acs5", DETAILED_VARS)
subject = fetch_acs("acs5/subject", SUBJECT_VARS)

df = detailed.merge(subject[["state", *SUBJECT_VARS.values()]], on="state", how="inner")
df = df.rename(columns={"state": "id", "NAME": "state"})

# --------------------------------------------------
# Postal abbreviations (US-AL -> AL)
# --------------------------------------------------

state_abbr = {
    sub.name: sub.code.split("-")[1]
    for sub in pycountry.subdivisions.get(country_code="US")
}
df["abbr"] = df["state"].map(state_abbr)

# --------------------------------------------------
# Obesity (BRFSS, not part of ACS)
# --------------------------------------------------

print(f"Merging obesity rates from {OBESITY_SOURCE}...")
obesity = pd.read_csv(OBESITY_SOURCE, usecols=["state", "obesity"])
df = df.merge(obesity, on="state", how="left")

df["id"] = df["id"].astype(int)
df = df[["id", "state", "abbr", "poverty", "age", "income", "healthcare", "obesity"]]
df = df.sort_values("id").reset_index(drop=True)

# --------------------------------------------------
# Sanity Check
# --------------------------------------------------

print(f"States fetched: {len(df)}")

if len(df) != 51:
    print("⚠ WARNING: Expected 50 states + DC. Check the ACS response.")
missing_abbr = df[df["abbr"].isna()]["state"].tolist()
if missing_abbr:
    print(f"⚠ WARNING: No postal code for: {', '.join(missing_abbr)}")
missing_obesity = df[df["obesity"].isna()]["state"].tolist()
if missing_obesity:
    print(f"⚠ WARNING: No obesity rate for: {', '.join(missing_obesity)}")
else:
    print("✓ Every state has an obesity rate.")

# --------------------------------------------------
# Save CSV
# --------------------------------------------------

os.makedirs(os.path.dirname(OUTPUT_FILE) or ".", exist_ok=True)
df.to_csv(OUTPUT_FILE, index=False)

print(f"\nCSV successfully generated: {OUTPUT_FILE}")
