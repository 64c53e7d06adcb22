"""grammar-converters: export command-generator grammars as BNF or SRGS.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import grammarconv

    grammar = grammarconv.parse_grammar('''
        ; grammar name Category I
        $Main = $deliver
        $deliver = bring me the {object} from the {placement}
    ''')
    catalogs = grammarconv.load_catalogs("catalogs.yaml")

    # Julius BNF, only what $Main reaches
    bnf = grammarconv.convert_to_bnf(grammar, catalogs)

    # Full SRGS XML document
    xml = grammarconv.convert_to_srgs(grammar, catalogs)

    # Render and write in one step
    grammarconv.save(grammar, catalogs, "gpsr_cat1.bnf", target="bnf")

    grammarconv.__version__
    '0.1.0'
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from grammarconv.converters.base import ConversionOutput, ConverterOptions
    from grammarconv.diagnostics import DiagnosticSink
    from grammarconv.model.nodes import Catalogs, Grammar

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def parse_grammar(text: str, name: str | None = None) -> "Grammar":
    """Parse grammar text into a ``Grammar``.

    Raises
    ------
    grammarconv.parser.GrammarParseErrorCollection
        If the text contains malformed lines.
    """
    from grammarconv.parser.parser import parse_grammar as _parse

    return _parse(text, name=name)


def load_grammar(path: str | Path) -> "Grammar":
    """Load a grammar from a text, YAML or JSON file.

    ``.yaml``/``.yml`` and ``.json`` files hold a serialized grammar;
    any other suffix is read as grammar text.
    """
    source = Path(path)
    suffix = source.suffix.lower()
    if suffix in _YAML_SUFFIXES or suffix == ".json":
        from grammarconv.model.serializer import ModelSerializer

        text = source.read_text(encoding="utf-8")
        serializer = ModelSerializer()
        if suffix == ".json":
            return serializer.grammar_from_json(text)
        return serializer.grammar_from_yaml(text)

    from grammarconv.parser.parser import load_grammar as _load

    return _load(source)


def load_catalogs(path: str | Path) -> "Catalogs":
    """Load reference catalogs from a YAML or JSON file."""
    from grammarconv.model.serializer import ModelSerializer

    source = Path(path)
    text = source.read_text(encoding="utf-8")
    serializer = ModelSerializer()
    if source.suffix.lower() == ".json":
        return serializer.catalogs_from_json(text)
    return serializer.catalogs_from_yaml(text)


def convert(
    grammar: "Grammar",
    catalogs: "Catalogs",
    target: str = "bnf",
    options: "ConverterOptions | None" = None,
    sink: "DiagnosticSink | None" = None,
) -> "ConversionOutput":
    """Convert ``grammar`` to ``target`` (``"bnf"``, ``"srgs"`` or ``"abnf"``)."""
    from grammarconv.converters import convert as _convert

    return _convert(grammar, catalogs, target=target, options=options, sink=sink)


def convert_to_bnf(
    grammar: "Grammar",
    catalogs: "Catalogs",
    include_manual_answers: bool = False,
) -> str:
    """Return the BNF document for ``grammar``."""
    from grammarconv.converters import convert_to_bnf as _to_bnf

    return _to_bnf(grammar, catalogs, include_manual_answers)


def convert_to_srgs(grammar: "Grammar", catalogs: "Catalogs") -> str:
    """Return the SRGS XML document for ``grammar``."""
    from grammarconv.converters import convert_to_srgs as _to_srgs

    return _to_srgs(grammar, catalogs)


def convert_to_abnf(grammar: "Grammar", catalogs: "Catalogs") -> str:
    """Return the ABNF document for ``grammar``.

    Raises
    ------
    NotImplementedError
        Always; ABNF export is not implemented.
    """
    from grammarconv.converters import convert_to_abnf as _to_abnf

    return _to_abnf(grammar, catalogs)


def save(
    grammar: "Grammar",
    catalogs: "Catalogs",
    path: str | Path,
    target: str = "bnf",
    options: "ConverterOptions | None" = None,
) -> "ConversionOutput":
    """Convert ``grammar`` and write it to ``path``; no file on failure."""
    from grammarconv.converters import save as _save

    return _save(grammar, catalogs, path, target=target, options=options)


__all__ = [
    "__version__",
    "parse_grammar",
    "load_grammar",
    "load_catalogs",
    "convert",
    "convert_to_bnf",
    "convert_to_srgs",
    "convert_to_abnf",
    "save",
]
