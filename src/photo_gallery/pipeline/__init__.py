"""Manifest generation pipeline."""

from .reconciler import PhotoIdCounter, PhotoReconciler, ReconciliationReport
from .manifest import ManifestGenerator, assemble_manifest, render_manifest, write_manifest

__all__ = [
    'PhotoIdCounter',
    'PhotoReconciler',
    'ReconciliationReport',
    'ManifestGenerator',
    'assemble_manifest',
    'render_manifest',
    'write_manifest',
]
