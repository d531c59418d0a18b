"""Processing stages that drain generators into batches and tables."""

import logging
from typing import Any, Iterator, List

import pandas as pd
import pyarrow as pa

from .protocols import Steppable


class GeneratorBatcher:
    """
    Drains a Generator into fixed-size batches.

    Single Responsibility: Group stepped values into batches.
    """

    def __init__(self, batch_size: int = 1000):
        """
        Initialize batcher.

        Args:
            batch_size: Number of values per batch
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size

    def batch(self, generator: Steppable) -> Iterator[List[Any]]:
        """
        Batch the values of a generator.

        Args:
            generator: Generator, or anything else steppable, to drain

        Yields:
            Lists of values (batches); the last one may be shorter
        """
        batch: List[Any] = []
        try:
            while True:
                result = generator.step()
                if result.done:
                    break
                batch.append(result.value)
                if len(batch) >= self.batch_size:
                    yield batch
                    batch = []
        finally:
            generator.close()

        # Yield remaining values
        if batch:
            yield batch


class FrameTransformer:
    """
    Transforms batches into pandas DataFrames.

    Single Responsibility: Convert batches to DataFrames with batch metadata.
    """

    def __init__(self, column: str = "value"):
        self.column = column

    def transform(self, batches: Iterator[List[Any]]) -> Iterator[pd.DataFrame]:
        """
        Transform batches to DataFrames.

        Args:
            batches: Iterator of batches

        Yields:
            One DataFrame per batch, with a batch_number column
        """
        logger = logging.getLogger(__name__)
        for batch_num, batch in enumerate(batches, 1):
            df = pd.DataFrame({self.column: batch})
            df["batch_number"] = batch_num

            logger.debug(f"Created DataFrame batch {batch_num} with {len(df)} rows")
            yield df


def to_table(generator: Steppable, column: str = "value", batch_size: int = 1000) -> pa.Table:
    """Drain a generator into a single pyarrow Table with one column."""
    batches = [
        pa.record_batch([pa.array(batch)], names=[column])
        for batch in GeneratorBatcher(batch_size).batch(generator)
    ]
    if not batches:
        return pa.table({column: pa.array([], type=pa.null())})
    return pa.Table.from_batches(batches)
