"""Abstract base class for grammar conversion targets.

Each output format (BNF, SRGS, ABNF) implements ``ConverterTarget`` and
produces a ``ConversionOutput`` holding the rendered text plus every
diagnostic reported while rendering it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from grammarconv.diagnostics import Diagnostic, DiagnosticCollector, DiagnosticSink

if TYPE_CHECKING:
    from grammarconv.model.nodes import Catalogs, Grammar


@dataclass(frozen=True)
class ConverterOptions:
    """Settings shared by all conversion targets.

    Parameters
    ----------
    include_comments:
        Write ``/* section */`` comments into BNF output.
    include_manual_answers:
        Add the hand-written answer rules to BNF output.
    indent:
        Indentation unit for SRGS XML output.
    language:
        Value of the SRGS ``xml:lang`` attribute.
    """

    include_comments: bool = True
    include_manual_answers: bool = False
    indent: str = "\t"
    language: str = "en-US"


@dataclass
class ConversionOutput:
    """Result of converting one grammar.

    Parameters
    ----------
    text:
        The rendered grammar document.
    target:
        Name of the target that produced it, e.g. ``"bnf"``.
    grammar_name:
        Name of the converted grammar.
    diagnostics:
        Non-fatal findings reported during the conversion.  The caller
        should surface these to the user.
    metadata:
        Arbitrary key/value pairs emitted by the target, such as the
        number of rules written.
    """

    text: str
    target: str
    grammar_name: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    metadata: dict[str, object] = field(default_factory=dict)

    def summary(self) -> str:
        """Return a one-line human-readable summary of this output."""
        rule_count = self.metadata.get("rule_count", 0)
        return (
            f"Converted {self.grammar_name!r} to {self.target}: "
            f"{rule_count} rule(s), {len(self.diagnostics)} diagnostic(s)"
        )


def export_path(output_path: str | Path, grammar_name: str, extension: str) -> Path:
    """Return the file a batch export writes ``grammar_name`` to.

    ``~/robocup/gpsr`` and grammar ``"Category I"`` with extension
    ``bnf`` give ``~/robocup/gpsr_Category_I.bnf``.
    """
    output = Path(output_path).expanduser()
    filename = f"{output.stem}_{grammar_name.replace(' ', '_')}.{extension}"
    return (output.parent / filename).resolve()


class ConverterTarget(ABC):
    """Abstract base class for grammar output formats.

    Subclasses implement :attr:`name`, :attr:`extension` and
    :meth:`render`.

    The contract for :meth:`render` is:

    * **Deterministic**: identical inputs always produce identical text.
    * **Pure**: no file I/O; writing is left to :meth:`write`.
    * **Best effort**: recoverable problems become diagnostics
      reported to the sink; only unimplemented formats and grammars
      without a root rule raise.

    Parameters
    ----------
    options:
        Conversion settings.  Defaults to ``ConverterOptions()``.
    """

    def __init__(self, options: ConverterOptions | None = None) -> None:
        self._options = options if options is not None else ConverterOptions()

    @property
    def options(self) -> ConverterOptions:
        return self._options

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique short name for this target, e.g. ``"bnf"``."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension for this target's output, without the dot."""

    @abstractmethod
    def render(
        self,
        grammar: "Grammar",
        catalogs: "Catalogs",
        sink: DiagnosticSink,
    ) -> tuple[str, dict[str, object]]:
        """Render ``grammar`` and return ``(text, metadata)``."""

    def convert(
        self,
        grammar: "Grammar",
        catalogs: "Catalogs",
        sink: DiagnosticSink | None = None,
    ) -> ConversionOutput:
        """Convert ``grammar`` into a ``ConversionOutput``.

        Parameters
        ----------
        grammar:
            The grammar to convert.
        catalogs:
            Reference data enumerated into terminal rules.
        sink:
            Optional caller sink; it receives every diagnostic as well.

        Returns
        -------
        ConversionOutput
            The rendered text, diagnostics and metadata.
        """
        collector = DiagnosticCollector(log=sink is None)
        try:
            text, metadata = self.render(grammar, catalogs, collector)
        finally:
            if sink is not None:
                for diagnostic in collector.diagnostics:
                    sink.report(diagnostic)
        return ConversionOutput(
            text=text,
            target=self.name,
            grammar_name=grammar.name,
            diagnostics=collector.diagnostics,
            metadata=metadata,
        )

    def write(
        self,
        grammar: "Grammar",
        catalogs: "Catalogs",
        stream: TextIO,
        sink: DiagnosticSink | None = None,
    ) -> ConversionOutput:
        """Convert ``grammar`` and write the result to ``stream``.

        Nothing is written if the conversion raises.
        """
        output = self.convert(grammar, catalogs, sink)
        stream.write(output.text)
        return output
