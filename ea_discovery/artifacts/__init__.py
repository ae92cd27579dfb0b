"""Artifact generation package.

Provides:
- ArtifactGenerator: prompt -> gateway -> JSON recovery -> validated bundle
- Synthesizer: flagged placeholders for sections the model omitted
- Exporter: JSON export document and download filenames
"""

from ea_discovery.artifacts.generator import ArtifactGenerator

__all__ = ["ArtifactGenerator"]
