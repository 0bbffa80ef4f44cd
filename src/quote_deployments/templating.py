"""Address constant templating for Solidity sources."""

import re
from typing import Optional, Pattern, Sequence, Tuple

from .checksum import Hasher, normalize
from .constants import NETWORK_COMMENT_FORMAT, NETWORK_COMMENT_PATTERN, QUOTE_CONSTANTS
from .exceptions import DeclarationNotFoundError
from .logging import logger
from .types import (
    ChainRegistry,
    ConstantOutcome,
    ConstantSpec,
    SubstitutionStatus,
    TemplateReport,
)


def declaration_pattern(spec: ConstantSpec) -> Pattern[str]:
    """
    Pattern for `address <visibility> constant <NAME> = 0x<40 hex>;`.

    The declaration must open its line, so commented-out declarations never
    match. Group 1 is everything before the literal, group 2 the literal.
    """
    return re.compile(
        rf"^([ \t]*address\s+{spec.visibility}\s+constant\s+{re.escape(spec.name)}\s*=\s*)"
        r"(0x[0-9a-fA-F]{40})(?=\s*;)",
        re.MULTILINE,
    )


class TemplateEngine:
    """Rewrites a fixed table of address constants in a source file."""

    def __init__(
        self,
        constants: Sequence[ConstantSpec] = QUOTE_CONSTANTS,
        comment_pattern: Optional[str] = NETWORK_COMMENT_PATTERN,
        comment_format: str = NETWORK_COMMENT_FORMAT,
        hasher: Optional[Hasher] = None,
    ):
        self.constants = tuple(constants)
        self.patterns = {spec.name: declaration_pattern(spec) for spec in self.constants}
        self.comment_pattern = re.compile(comment_pattern) if comment_pattern else None
        self.comment_format = comment_format
        self.hasher = hasher

    def apply(
        self,
        template: str,
        registry: ChainRegistry,
        chain_name: Optional[str] = None,
    ) -> Tuple[str, TemplateReport]:
        """
        Substitute registry addresses into the constant declarations.

        Only the address literals of the declared constants change, plus the
        network comment when chain_name is given. Running again on the output
        with the same registry changes nothing.

        Args:
            template: Source text
            registry: Registry to take values from
            chain_name: Network name for the metadata comment (None leaves it alone)

        Returns:
            Tuple of (rewritten text, report)
        """
        text = template
        outcomes = []

        for spec in self.constants:
            pattern = self.patterns[spec.name]
            raw = registry.lookup(spec.source)
            value = normalize(raw, self.hasher) if raw else None
            literals = [m.group(2) for m in pattern.finditer(text)]

            if not literals:
                status = SubstitutionStatus.NO_DECLARATION
            elif value is None:
                status = SubstitutionStatus.NO_VALUE
            elif all(literal == value for literal in literals):
                status = SubstitutionStatus.ALREADY_CURRENT
            else:
                text = pattern.sub(lambda m: m.group(1) + value, text)
                status = SubstitutionStatus.SUBSTITUTED

            outcomes.append(ConstantOutcome(name=spec.name, status=status, value=value))

        comment_updated = False
        if chain_name is not None and self.comment_pattern is not None:
            comment = self.comment_format.format(chain_name=chain_name)
            rewritten = self.comment_pattern.sub(lambda m: comment, text, count=1)
            comment_updated = rewritten != text
            text = rewritten

        return text, TemplateReport(outcomes=tuple(outcomes), comment_updated=comment_updated)


def raise_for_drift(report: TemplateReport, target: str) -> None:
    """
    Fail when a constant with a registry value has no declaration.

    Raises:
        DeclarationNotFoundError: Listing every undeclared constant
    """
    missing = report.missing_declarations()
    if missing:
        raise DeclarationNotFoundError(
            f"No declaration found in {target} for: {', '.join(missing)}"
        )

    for outcome in report.outcomes:
        if outcome.status is SubstitutionStatus.NO_DECLARATION:
            logger.warning(f"{outcome.name}: no declaration in {target}")
