# Bundlediff v1.0.0
"""
Services package for Bundlediff.
Contains descriptor loading and report rendering.
"""
from services.loader import DescriptorLoader, LoadedDescriptor, load_main_section
from services.report import render_report, summarize

__all__ = [
    "DescriptorLoader",
    "LoadedDescriptor",
    "load_main_section",
    "render_report",
    "summarize"
]
