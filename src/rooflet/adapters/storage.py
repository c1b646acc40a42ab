from pathlib import Path

import pandas as pd

_READERS = {
    ".parquet": pd.read_parquet,
    ".json": lambda p: pd.read_json(p, orient="records"),
    ".csv": pd.read_csv,
}


def _suffix(path: str | Path) -> str:
    suffix = Path(path).suffix.lower()
    if suffix not in _READERS:
        raise ValueError(f"unsupported listings file type: {suffix or path}")
    return suffix


def read_df(path: str | Path) -> pd.DataFrame:
    return _READERS[_suffix(path)](path)


def write_df(df: pd.DataFrame, path: str | Path) -> None:
    suffix = _suffix(path)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".parquet":
        df.to_parquet(path, index=False)
    elif suffix == ".json":
        df.to_json(path, orient="records", indent=2)
    else:
        df.to_csv(path, index=False)
