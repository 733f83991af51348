# shellbridge/shell/adapter.py
"""
Shell dialect adaptation for shellbridge.

Commands are rewritten by an ordered table of independent passes. Each pass
looks at the text produced by the passes before it and either returns ``None``
(nothing to rewrite) or the new text together with the change it made. Pass
order is part of the contract: later passes see the output of earlier ones.
"""
import re
from typing import Callable, Dict, List, Match, Optional, Pattern, Sequence, Tuple

from shellbridge.shell.dialects import ShellDialect
from shellbridge.shell.models import AdaptationChange, AdaptedCommand, ChangeType
from shellbridge.utils.logging import get_logger

logger = get_logger(__name__)

Rewrite = Optional[Tuple[str, AdaptationChange]]
AdaptationPass = Callable[[str], Rewrite]


def _substitute_all(
    pattern: Pattern[str],
    command: str,
    replace: Callable[[Match[str]], str]
) -> Optional[Tuple[str, str, str]]:
    """
    Rewrite every match of ``pattern`` in one go.

    Returns:
        The new text plus the rewritten span before and after (from the first
        match to the last), or None if nothing matched.
    """
    matches = list(pattern.finditer(command))
    if not matches:
        return None

    result = pattern.sub(replace, command)
    start, end = matches[0].start(), matches[-1].end()
    tail = len(command) - end
    return result, command[start:end], result[start:len(result) - tail]


# --- Bash to zsh passes ---

_ARRAY_JOIN_PATTERN = re.compile(r"\$\{(\w+)\[\*\]\}")


def fix_array_expansion(command: str) -> Rewrite:
    """
    Rewrite ``${arr[*]}`` to zsh's explicit ``${(j: :)arr}`` join.

    Bash joins ``[*]`` with the first character of IFS while zsh always joins
    with spaces, so the join separator is made explicit.
    """
    rewrite = _substitute_all(_ARRAY_JOIN_PATTERN, command, lambda match: "${(j: :)" + match.group(1) + "}")
    if rewrite is None:
        return None

    result, original, replacement = rewrite
    return result, AdaptationChange(
        type=ChangeType.ARRAY_EXPANSION,
        description="Converted ${arr[*]} to zsh explicit join syntax",
        original=original,
        replacement=replacement,
    )


_ECHO_ESCAPE_PATTERN = re.compile(r"\becho\s+-e\s+")


def fix_echo_escape(command: str) -> Rewrite:
    """Drop ``-e`` from echo; zsh's echo interprets escapes by default."""
    if not _ECHO_ESCAPE_PATTERN.search(command):
        return None

    result = _ECHO_ESCAPE_PATTERN.sub("echo ", command)
    return result, AdaptationChange(
        type=ChangeType.ECHO_ESCAPE,
        description="Removed -e flag from echo (zsh interprets escapes by default)",
        original="echo -e",
        replacement="echo",
    )


_READ_PROMPT_PATTERN = re.compile(
    r"""\bread\s+-p\s+(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)')\s+(?P<var>\w+)"""
)


def _escape_for_double_quotes(text: str) -> str:
    return re.sub(r'([\\"$`])', r"\\\1", text)


def _read_replacement(match: Match[str]) -> str:
    if match.group("double") is not None:
        prompt = match.group("double")
    else:
        # Single-quoted text was literal; keep it literal inside double quotes
        prompt = _escape_for_double_quotes(match.group("single"))
    return f'read "{match.group("var")}?{prompt}"'


def fix_read_command(command: str) -> Rewrite:
    """Rewrite ``read -p "prompt" var`` to zsh's ``read "var?prompt"``."""
    rewrite = _substitute_all(_READ_PROMPT_PATTERN, command, _read_replacement)
    if rewrite is None:
        return None

    result, original, replacement = rewrite
    return result, AdaptationChange(
        type=ChangeType.READ_COMMAND,
        description="Converted bash read -p syntax to zsh read var?prompt syntax",
        original=original,
        replacement=replacement,
    )



PCRE_DIRECTIVE = "setopt RE_MATCH_PCRE 2>/dev/null; "
_PCRE_ONLY_CONSTRUCTS = ("(?", "\\d", "\\w", "\\s", "+?", "*?")


def fix_regex_matching(command: str) -> Rewrite:
    """
    Enable PCRE matching when an ``=~`` pattern relies on PCRE-only syntax.

    The directive is best-effort: its errors are discarded and the ``;``
    separator keeps the original command running if the option is unsupported.
    """
    if "=~" not in command or PCRE_DIRECTIVE.strip() in command:
        return None

    pattern_side = command.split("=~", 1)[1]
    if not any(construct in pattern_side for construct in _PCRE_ONLY_CONSTRUCTS):
        return None

    result = PCRE_DIRECTIVE + command
    return result, AdaptationChange(
        type=ChangeType.REGEX_MATCHING,
        description="Added setopt RE_MATCH_PCRE for PCRE regex compatibility",
        original=command,
        replacement=result,
    )


def find_backtick_substitutions(command: str) -> List[Tuple[int, int]]:
    """
    Return ``(open, close)`` index pairs of backtick substitutions.

    Backticks pair by occurrence. Backticks inside single quotes or escaped with
    a backslash are literal and skipped; inside double quotes they still start
    a substitution. A trailing unpaired backtick is ignored.
    """
    spans = []
    open_at = None
    in_single = False
    in_double = False
    index = 0
    while index < len(command):
        char = command[index]
        if char == "\\" and not in_single:
            index += 2
            continue
        if char == "'" and not in_double and open_at is None:
            in_single = not in_single
        elif char == '"' and not in_single and open_at is None:
            in_double = not in_double
        elif char == "`" and not in_single:
            if open_at is None:
                open_at = index
            else:
                spans.append((open_at, index))
                open_at = None
        index += 1

    if in_single or in_double:
        # Unbalanced quotes: quoting context is unknown, rewrite nothing
        return []
    return spans


def fix_command_substitution(command: str) -> Rewrite:
    """Convert backtick command substitution to ``$(...)``."""
    if "`" not in command:
        return None

    spans = find_backtick_substitutions(command)
    if not spans:
        return None

    result = command
    # Replace from the end so earlier indices stay valid
    for start, end in reversed(spans):
        result = result[:start] + "$(" + result[start + 1:end] + ")" + result[end + 1:]

    return result, AdaptationChange(
        type=ChangeType.COMMAND_SUBSTITUTION,
        description="Converted backtick command substitution to $()",
        original=command,
        replacement=result,
    )


# --- Zsh to bash passes ---

_PARAMETER_FLAG_PATTERN = re.compile(r"\$\{\(([UuLl])\)(\w+)\}")

# zsh flag -> bash case-modification operator
PARAMETER_FLAG_OPERATORS = {
    "U": "^^",  # uppercase
    "u": "^",   # capitalize first
    "L": ",,",  # lowercase
    "l": ",",   # lowercase first
}


def fix_parameter_flags(command: str) -> Rewrite:
    """Convert zsh ``${(U)var}``-style case flags to bash ``${var^^}`` operators."""
    rewrite = _substitute_all(
        _PARAMETER_FLAG_PATTERN,
        command,
        lambda match: "${" + match.group(2) + PARAMETER_FLAG_OPERATORS[match.group(1)] + "}",
    )
    if rewrite is None:
        return None

    result, original, replacement = rewrite
    return result, AdaptationChange(
        type=ChangeType.PARAMETER_EXPANSION,
        description="Converted zsh parameter flag to bash equivalent",
        original=original,
        replacement=replacement,
    )



# Ordered pass tables per target dialect
BASH_TO_ZSH_PASSES: Tuple[AdaptationPass, ...] = (
    fix_array_expansion,
    fix_echo_escape,
    fix_read_command,
    fix_regex_matching,
    fix_command_substitution,
)

ZSH_TO_BASH_PASSES: Tuple[AdaptationPass, ...] = (
    fix_parameter_flags,
)

PASSES_BY_DIALECT: Dict[ShellDialect, Tuple[AdaptationPass, ...]] = {
    ShellDialect.ZSH: BASH_TO_ZSH_PASSES,
    ShellDialect.BASH: ZSH_TO_BASH_PASSES,
    ShellDialect.SH: (),
}


def apply_passes(
    command: str,
    passes: Sequence[AdaptationPass]
) -> Tuple[str, List[AdaptationChange]]:
    """
    Fold the passes over the command, left to right.

    Returns:
        The rewritten text and the changes in the order they were applied.
    """
    text = command
    changes: List[AdaptationChange] = []
    for adaptation_pass in passes:
        rewrite = adaptation_pass(text)
        if rewrite is None:
            continue
        text, change = rewrite
        changes.append(change)
    return text, changes


class ShellAdapter:
    """Adapts shell commands for a target dialect."""

    def __init__(self, target_dialect: Optional[ShellDialect] = None):
        """
        Initialize the adapter.

        Args:
            target_dialect: Dialect to adapt for; defaults to the user's shell.
        """
        self.target_dialect = target_dialect or ShellDialect.current()
        self._logger = logger

    @property
    def passes(self) -> Tuple[AdaptationPass, ...]:
        return PASSES_BY_DIALECT[self.target_dialect]

    def adapt(self, command: str) -> AdaptedCommand:
        """
        Adapt a command for the target dialect.

        Args:
            command: The shell command to adapt.

        Returns:
            The adapted command with the changes that were applied.
        """
        adapted, changes = apply_passes(command, self.passes)

        if changes:
            self._logger.debug(
                f"Adapted command for {self.target_dialect.value}: {command!r} -> {adapted!r}",
                extra={"changes": [change.type.value for change in changes]},
            )

        return AdaptedCommand(
            original=command,
            adapted=adapted,
            changes=changes,
            target_dialect=self.target_dialect,
        )


def adapt_command(command: str, target_dialect: Optional[ShellDialect] = None) -> AdaptedCommand:
    """Adapt a command with a throwaway adapter for the given dialect."""
    return ShellAdapter(target_dialect).adapt(command)
