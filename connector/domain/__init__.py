from .entries import BuildEntry, ReportEntry, TestEntry
from .parts import Commit, Pair, Step

__all__ = ["BuildEntry", "ReportEntry", "TestEntry", "Commit", "Pair", "Step"]
