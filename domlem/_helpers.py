from typing import Iterable
from typing import Union

import numpy as np
import pandas as pd


def get_nominal_indexes(df: pd.DataFrame) -> list[int]:
    """Return indices of nominal columns in given dataframe. Every non numeric
    column (object, string or categorical dtype) is nominal.

    Args:
        df (pd.DataFrame): DataFrame

    Returns:
        list[int]: list of indices of nominal columns
    """
    dtype_mask = [
        not pd.api.types.is_numeric_dtype(dtype) for dtype in df.dtypes
    ]
    nominal_indexes = np.where(dtype_mask)[0]
    return nominal_indexes.tolist()


def as_mask(
    objects: Union[np.ndarray, Iterable[int]], number_of_objects: int
) -> np.ndarray:
    """Converts set of objects into boolean mask over all objects of the table.

    Args:
        objects (Union[np.ndarray, Iterable[int]]): either indices of objects or
            boolean mask which is then only copied
        number_of_objects (int): number of objects in the table

    Returns:
        np.ndarray: boolean mask
    """
    if isinstance(objects, np.ndarray) and objects.dtype == bool:
        if objects.shape[0] != number_of_objects:
            raise ValueError(
                f"Mask of length {objects.shape[0]} does not match table with "
                f"{number_of_objects} objects"
            )
        return objects.copy()
    mask = np.zeros(number_of_objects, dtype=bool)
    indices = np.fromiter(objects, dtype=int) if not isinstance(
        objects, np.ndarray) else objects.astype(int)
    mask[indices] = True
    return mask


def as_indices(mask: np.ndarray) -> np.ndarray:
    return np.flatnonzero(mask)


def to_python_scalar(value):
    """Unwraps numpy scalar so that it prints the same way as the value read from
    data (e.g. "31.0" for floats and "2" for integers).
    """
    if isinstance(value, np.generic):
        return value.item()
    return value
