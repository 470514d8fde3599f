# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Errors raised while reading and analyzing class scripts."""


def class_identity(module_name: str, class_name: str) -> str:
    """Build the identity string of one class script.

    Args:
        module_name: Module that owns the class script.
        class_name: Dotted, possibly nested, class name.

    Returns:
        Identity in the form ``~<module>/<class>``.
    """
    return f"~{module_name}/{class_name}"


class ClassScriptError(RuntimeError):
    """Represent a fatal failure to analyze one class script.

    Attributes:
        module_name: Module that owns the failing script.
        class_name: Qualified name of the failing class.
        identity: Identity string embedded in the error message.
    """

    kind = "class_script_error"

    def __init__(self, message: str, module_name: str, class_name: str) -> None:
        self.module_name = module_name
        self.class_name = class_name
        self.identity = class_identity(module_name, class_name)
        super().__init__(message)


class TooManyStatementsError(ClassScriptError):
    """Raised when a class script holds more than one top-level statement."""

    kind = "too_many_statements"

    def __init__(self, module_name: str, class_name: str) -> None:
        super().__init__(
            f"Too many statements: {class_identity(module_name, class_name)}",
            module_name,
            class_name,
        )


class BadScriptError(ClassScriptError):
    """Raised when a class script does not have a recognized class shape."""

    kind = "bad_script"

    def __init__(self, module_name: str, class_name: str) -> None:
        super().__init__(
            f"Bad script: {class_identity(module_name, class_name)}",
            module_name,
            class_name,
        )


class BadFlagError(ClassScriptError):
    """Raised when an ``am`` declaration is not a boolean literal."""

    kind = "bad_flag"

    def __init__(self, flag_name: str, module_name: str, class_name: str) -> None:
        self.flag_name = flag_name
        super().__init__(
            f"Bad flag: {flag_name} in {class_identity(module_name, class_name)}",
            module_name,
            class_name,
        )


class ScriptSyntaxError(ClassScriptError):
    """Raised when class script source cannot be parsed."""

    kind = "syntax_error"

    def __init__(self, module_name: str, class_name: str, line: int) -> None:
        self.line = line
        super().__init__(
            f"Syntax error near line {line}: {class_identity(module_name, class_name)}",
            module_name,
            class_name,
        )


class ScriptSourceError(RuntimeError):
    """Represent a failure to read class scripts from an archive or directory."""
