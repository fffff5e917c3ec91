r"""
abbrev_completer - backslash abbreviation completion for editors.

Type `\` followed by a mnemonic (e.g. `\lambda`, `\to`) and the language
server offers the Unicode symbols registered for it in keymap.json.
"""

__version__ = "0.1.0"
