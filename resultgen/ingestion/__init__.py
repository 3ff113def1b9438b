"""
Data Ingestion

Modules:
- codec: Parse roster CSV text and serialize ranked results
- interactive: Console prompts that build a dataset by hand
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "decode":
        from resultgen.ingestion.codec import decode
        return decode
    if name == "encode":
        from resultgen.ingestion.codec import encode
        return encode
    if name == "FormatError":
        from resultgen.ingestion.codec import FormatError
        return FormatError
    if name == "prompt_dataset":
        from resultgen.ingestion.interactive import prompt_dataset
        return prompt_dataset
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
