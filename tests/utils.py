import os
import pathlib

import pandas as pd

dir_path: pathlib.Path = pathlib.Path(os.path.dirname(os.path.realpath(__file__)))


def read_dataset(
    dataset_name: str, decision_column: str = "state", index_column: str = "bus"
) -> tuple[pd.DataFrame, pd.Series]:
    base_path: pathlib.Path = dir_path / "datasets" / dataset_name
    df: pd.DataFrame = pd.read_csv(base_path / "data.csv", index_col=index_column)
    return df.drop(decision_column, axis=1), df[decision_column]
