"""limesub: timed-text (SRT/JSON/XML/TTML) to ASS conversion and ASS resampling.

Entry points live in `limesub.pipeline` (library) and `limesub.run_pipeline` (CLI).
"""

__version__ = "3.0.0"
