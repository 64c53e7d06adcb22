"""ABNF target placeholder.

The format is registered so that ``available_targets()`` lists it and
the CLI accepts ``--format abnf``, but conversion always fails before
any output is produced.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from grammarconv.converters.base import ConverterTarget
from grammarconv.diagnostics import DiagnosticSink

if TYPE_CHECKING:
    from grammarconv.model.nodes import Catalogs, Grammar


class AbnfTarget(ConverterTarget):
    """Augmented BNF output; not implemented."""

    @property
    def name(self) -> str:
        return "abnf"

    @property
    def extension(self) -> str:
        return "abnf"

    def render(
        self,
        grammar: "Grammar",
        catalogs: "Catalogs",
        sink: DiagnosticSink,
    ) -> NoReturn:
        raise NotImplementedError("ABNF export is not implemented")
