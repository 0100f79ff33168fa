"""
Per-manufacturer OCR confusion table.

Letter-confusion fixes are observed per manufacturer, so they are kept as
data. The default table holds the corrections seen on NKBA-style order
sheets: the VDB/VBD transposition and WDH read for a vanity/sink prefix.
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConfusionTable:
    """Known code misreads used when generating candidate keys."""
    # Pairs of prefixes that are swapped for each other (applied both ways)
    transpositions: tuple[tuple[str, str], ...] = ()
    # Misread prefix -> prefixes to try with the same remainder, in order
    family_remaps: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def swaps_for(self, code: str) -> list[str]:
        """Codes produced by applying each transposition in both directions."""
        results = []
        for left, right in self.transpositions:
            if left in code:
                results.append(code.replace(left, right, 1))
            if right in code:
                results.append(code.replace(right, left, 1))
        return results

    def sibling_prefixes(self, prefix: str) -> list[str]:
        """Typo siblings of an exact letter prefix."""
        siblings = []
        for left, right in self.transpositions:
            if prefix == left:
                siblings.append(right)
            elif prefix == right:
                siblings.append(left)
        return siblings

    @classmethod
    def from_dict(cls, data: dict) -> 'ConfusionTable':
        """
        Load from JSON, e.g.::

            {"transpositions": [["VDB", "VBD"]],
             "family_remaps": {"WDH": ["VDB", "VSB", "SB"]}}
        """
        pairs = tuple(
            (str(p[0]).upper(), str(p[1]).upper())
            for p in data.get('transpositions', [])
            if len(p) == 2
        )
        remaps = {
            str(k).upper(): tuple(str(v).upper() for v in values)
            for k, values in (data.get('family_remaps') or {}).items()
        }
        return cls(transpositions=pairs, family_remaps=remaps)


DEFAULT_CONFUSIONS = ConfusionTable(
    transpositions=(("VDB", "VBD"),),
    family_remaps={"WDH": ("VDB", "VBD", "VSB", "SB", "DB", "B")},
)
