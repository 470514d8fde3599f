# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for class script analysis."""

from csa.assembler import AnalyzerError, ClassScriptAnalyzer, analyze_class_script
from csa.errors import (
    BadFlagError,
    BadScriptError,
    ClassScriptError,
    ScriptSourceError,
    ScriptSyntaxError,
    TooManyStatementsError,
)
from csa.model import ArchiveAnalysis, ClassAnalysis, ModuleAnalysis
from csa.settings import AnalysisSettings
from csa.sources import ClassScript, read_scripts

__all__ = [
    "AnalysisSettings",
    "AnalyzerError",
    "ArchiveAnalysis",
    "BadFlagError",
    "BadScriptError",
    "ClassAnalysis",
    "ClassScript",
    "ClassScriptAnalyzer",
    "ClassScriptError",
    "ModuleAnalysis",
    "ScriptSourceError",
    "ScriptSyntaxError",
    "TooManyStatementsError",
    "analyze_class_script",
    "read_scripts",
]
