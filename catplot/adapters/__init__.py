from catplot.adapters.normalize import normalize_rows, split_series_entry

__all__ = ["normalize_rows", "split_series_entry"]
