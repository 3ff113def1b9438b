"""
Result Generator - Core Package

This package contains the core modules for:
- Tabular ingestion and serialization (resultgen.ingestion)
- Concurrent scoring and ranking (resultgen.scoring)
- Report assembly, export and the pipeline entry point
"""

__version__ = "1.0.0"
