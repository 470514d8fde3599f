# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Analyze class scripts and assemble module and archive analyses."""

import concurrent.futures
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from csa.attachment import attach_remarks
from csa.errors import ClassScriptError, ScriptSyntaxError, class_identity
from csa.model import ArchiveAnalysis, ClassAnalysis, ModuleAnalysis
from csa.recognizer import ClassScriptRecognizer
from csa.remarks import collect_remarks
from csa.settings import AnalysisSettings
from csa.sources import ClassScript
from csa.syntax import SyntaxParseError, parse_script

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzerError:
    """Represent a class script that could not be analyzed.

    Attributes:
        path: Archive member or relative path of the script.
        module_name: Module that owns the script.
        class_name: Qualified name of the failing class.
        kind: Error kind, e.g. ``bad_script`` or ``bad_flag``.
        message: Error message with the class identity embedded.
    """

    path: str
    module_name: str
    class_name: str
    kind: str
    message: str


def analyze_class_script(
    module_name: str,
    class_name: str,
    source: str,
    settings: AnalysisSettings | None = None,
) -> ClassAnalysis:
    """Analyze one class script.

    Args:
        module_name: Module that owns the script.
        class_name: Dotted class name.
        source: Script source text.
        settings: Analysis settings; defaults apply when omitted.

    Returns:
        Class analysis with remarks attached.

    Raises:
        ClassScriptError: If the script cannot be parsed or recognized.
    """
    settings = settings or AnalysisSettings()
    try:
        tree = parse_script(source)
    except SyntaxParseError as exc:
        raise ScriptSyntaxError(module_name, class_name, line=exc.line) from exc
    analysis = ClassScriptRecognizer(module_name, class_name).recognize(tree)
    remarks = collect_remarks(tree, marker=settings.remark_marker)
    if remarks:
        attach_remarks(remarks, analysis)
    return analysis


class ClassScriptAnalyzer:
    """Analyze a batch of class scripts into one archive analysis."""

    def __init__(self, settings: AnalysisSettings | None = None, max_workers: int = 4) -> None:
        """Initialize analyzer.

        Args:
            settings: Analysis settings; defaults apply when omitted.
            max_workers: Maximum number of worker threads.

        Raises:
            ValueError: If ``max_workers`` is not greater than zero.
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._settings = settings or AnalysisSettings()
        self._max_workers = max_workers

    def analyze(
        self, scripts: list[ClassScript]
    ) -> tuple[ArchiveAnalysis, list[AnalyzerError]]:
        """Analyze class scripts best-effort.

        A failing script is reported as an error while its siblings are
        still analyzed.

        Args:
            scripts: Class scripts to analyze.

        Returns:
            A tuple of the archive analysis and errors of failed scripts.
        """
        analyses: dict[int, ClassAnalysis] = {}
        errors: list[AnalyzerError] = []
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self._max_workers
        ) as executor:
            future_to_index = {
                executor.submit(
                    analyze_class_script,
                    script.module_name,
                    script.class_name,
                    script.source,
                    self._settings,
                ): index
                for index, script in enumerate(scripts)
            }
            for future in concurrent.futures.as_completed(future_to_index):
                index = future_to_index[future]
                script = scripts[index]
                try:
                    analyses[index] = future.result()
                except ClassScriptError as exc:
                    logger.warning(
                        f"Skipping class script due to analysis failure (path={script.path} "
                        f"kind={exc.kind} error={exc})"
                    )
                    errors.append(
                        AnalyzerError(
                            path=script.path,
                            module_name=exc.module_name,
                            class_name=exc.class_name,
                            kind=exc.kind,
                            message=str(exc),
                        )
                    )

        archive = assemble_archive(
            (scripts[index], analyses[index]) for index in sorted(analyses)
        )
        errors.sort(key=lambda error: error.path)
        logger.info(
            f"Class script analysis completed (scripts={len(scripts)} "
            f"modules={len(archive.modules)} errors={len(errors)})"
        )
        return archive, errors


def assemble_archive(
    results: Iterable[tuple[ClassScript, ClassAnalysis]],
) -> ArchiveAnalysis:
    """Merge class analyses into modules, and modules into an archive.

    Args:
        results: Iterable of ``(ClassScript, ClassAnalysis)`` pairs.

    Returns:
        Archive analysis with modules and classes sorted by name. Modules
        without analyzed classes do not appear.
    """
    classes_by_module: dict[str, dict[str, ClassAnalysis]] = {}
    for script, analysis in results:
        classes = classes_by_module.setdefault(script.module_name, {})
        if script.class_name in classes:
            logger.warning(
                "Duplicate class script replaces earlier analysis "
                f"(class={class_identity(script.module_name, script.class_name)})"
            )
        classes[script.class_name] = analysis
    archive = ArchiveAnalysis()
    for module_name in sorted(classes_by_module):
        classes = classes_by_module[module_name]
        archive.modules[module_name] = ModuleAnalysis(
            module_name=module_name,
            classes={name: classes[name] for name in sorted(classes)},
        )
    return archive
