"""erbgen.core.base: IR（中間表現）定義

純粋なデータ定義（最下層）
"""

from .ir import (
    CompiledTemplate,
    Declaration,
    EscapeMode,
    GeneratedFunction,
    OutputToken,
    OutputUnit,
    ScanResult,
    SourceFile,
    StatementToken,
    TextToken,
    Token,
    TypeSpec,
)

__all__ = [
    "CompiledTemplate",
    "Declaration",
    "EscapeMode",
    "GeneratedFunction",
    "OutputToken",
    "OutputUnit",
    "ScanResult",
    "SourceFile",
    "StatementToken",
    "TextToken",
    "Token",
    "TypeSpec",
]
