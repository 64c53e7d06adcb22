"""Grammar converters: render a ``Grammar`` as BNF, SRGS or ABNF.

Public API
----------
The stable surface is ``convert``, ``save``, the ``convert_to_*``
helpers and the ``ConversionOutput`` / ``ConverterOptions`` dataclasses.

Example
-------
::

    from grammarconv.converters import convert, save

    output = convert(grammar, catalogs, target="srgs")
    print(output.summary())

    save(grammar, catalogs, "gpsr_main.bnf", target="bnf")
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from grammarconv.converters.abnf import AbnfTarget
from grammarconv.converters.base import (
    ConversionOutput,
    ConverterOptions,
    ConverterTarget,
    export_path,
)
from grammarconv.converters.bnf import BnfTarget, sanitize_bnf
from grammarconv.converters.srgs import SrgsTarget

if TYPE_CHECKING:
    from grammarconv.diagnostics import DiagnosticSink
    from grammarconv.model.nodes import Catalogs, Grammar

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[ConverterTarget]] = {
    "bnf": BnfTarget,
    "srgs": SrgsTarget,
    "abnf": AbnfTarget,
}


def get_target(target: str, options: ConverterOptions | None = None) -> ConverterTarget:
    """Instantiate the registered target called ``target``.

    Raises
    ------
    ValueError
        If ``target`` is not a registered converter target.
    """
    if target not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise ValueError(
            f"Unknown converter target {target!r}. Available targets: {available}"
        )
    return _REGISTRY[target](options)


def convert(
    grammar: "Grammar",
    catalogs: "Catalogs",
    target: str = "bnf",
    options: ConverterOptions | None = None,
    sink: "DiagnosticSink | None" = None,
) -> ConversionOutput:
    """Convert ``grammar`` to the ``target`` format.

    Parameters
    ----------
    grammar:
        The grammar to convert.
    catalogs:
        Reference data enumerated into the terminal rules.
    target:
        One of :func:`available_targets`.
    options:
        Conversion settings.
    sink:
        Optional sink that receives every diagnostic.

    Returns
    -------
    ConversionOutput
        Rendered text, diagnostics and metadata.

    Raises
    ------
    ValueError
        If ``target`` is unknown.
    MissingRootError
        If the grammar has no ``$Main`` rule.
    NotImplementedError
        For ``target="abnf"``.
    """
    return get_target(target, options).convert(grammar, catalogs, sink)


def save(
    grammar: "Grammar",
    catalogs: "Catalogs",
    path: str | Path,
    target: str = "bnf",
    options: ConverterOptions | None = None,
    sink: "DiagnosticSink | None" = None,
) -> ConversionOutput:
    """Convert ``grammar`` and write the result to ``path``.

    The document is rendered completely before the file is opened, so a
    failed conversion never leaves a partial file behind.  ``OSError``
    from opening or writing the file propagates.
    """
    output = convert(grammar, catalogs, target=target, options=options, sink=sink)
    destination = Path(path)
    with destination.open("w", encoding="utf-8") as fh:
        fh.write(output.text)
    logger.debug("Wrote %s output for %r to %s", output.target, grammar.name, destination)
    return output


def available_targets() -> list[str]:
    """Return the list of registered converter target names."""
    return sorted(_REGISTRY)


# ---------------------------------------------------------------------------
# Per-format helpers
# ---------------------------------------------------------------------------


def convert_to_bnf(
    grammar: "Grammar",
    catalogs: "Catalogs",
    include_manual_answers: bool = False,
    *,
    options: ConverterOptions | None = None,
    sink: "DiagnosticSink | None" = None,
) -> str:
    """Return the BNF document for ``grammar``.

    ``include_manual_answers`` overrides the flag of the same name in
    ``options``.
    """
    base = options if options is not None else ConverterOptions()
    effective = replace(base, include_manual_answers=include_manual_answers)
    return BnfTarget(effective).convert(grammar, catalogs, sink).text


def convert_to_srgs(
    grammar: "Grammar",
    catalogs: "Catalogs",
    *,
    options: ConverterOptions | None = None,
    sink: "DiagnosticSink | None" = None,
) -> str:
    """Return the SRGS XML document for ``grammar``."""
    return SrgsTarget(options).convert(grammar, catalogs, sink).text


def convert_to_abnf(
    grammar: "Grammar",
    catalogs: "Catalogs",
    *,
    options: ConverterOptions | None = None,
    sink: "DiagnosticSink | None" = None,
) -> str:
    """Convert ``grammar`` to ABNF.

    Raises
    ------
    NotImplementedError
        Always; no output is produced.
    """
    return AbnfTarget(options).convert(grammar, catalogs, sink).text


__all__ = [
    "convert",
    "save",
    "get_target",
    "available_targets",
    "convert_to_bnf",
    "convert_to_srgs",
    "convert_to_abnf",
    "export_path",
    "sanitize_bnf",
    "ConversionOutput",
    "ConverterOptions",
    "ConverterTarget",
    "BnfTarget",
    "SrgsTarget",
    "AbnfTarget",
]
