"""Demonstrates how to enable and configure logging in dtkit.

dtkit logging is disabled by default. Users opt in by calling ``enable_logging()``,
which returns a ``LoggingHandle``. The handle can be used as a context manager
(``with enable_logging(): ...``) or disabled manually via ``handle.disable()``.
When the last active handle is disabled, dtkit logging is automatically turned off.

Key concepts shown here:

- ``level``: controls the minimum log level. The custom ``TRAINING`` level
  (numeric value 25, between INFO and WARNING) reports when training starts
  and finishes and is the default. ``DEBUG`` adds every chosen split and
  leaf; ``TRACE`` adds every scored candidate.
- ``log_format``: ``"short"`` shows ``timestamp | level | function - message``;
  ``"full"`` adds the module and line number.
- Automatic cleanup: logging is re-disabled when the context manager exits.
"""

import polars as pl

from dtkit import enable_logging, render_html, train_from_dataframe

df = pl.DataFrame({
    "person": ["Homer", "Marge", "Bart", "Lisa", "Maggie", "Abe", "Selma", "Otto", "Krusty"],
    "hairLength": [0, 10, 2, 6, 4, 1, 8, 10, 6],
    "weight": [250, 150, 90, 78, 20, 170, 160, 180, 200],
    "age": [36, 34, 10, 8, 1, 70, 41, 38, 45],
    "sex": ["male", "female", "male", "female", "female", "male", "female", "male", "male"],
})

# Enable logging at DEBUG level with full log format to see every split decision
with enable_logging(level="DEBUG", log_format="full"):
    model = train_from_dataframe(df, "sex", ignored_attributes=["person"])

    prediction = model.predict({"hairLength": 8, "weight": 290, "age": 38})
    print(f"\nPredicted: {prediction}\n")

    for rule in model.extract_rules():
        conditions = " and ".join(str(p) for p in rule.predicates) or "always"
        print(f"{conditions} -> {rule.prediction} ({rule.samples} samples)")

    print(f"\n{render_html(model.root)}\n")

# Logging automatically disabled here
