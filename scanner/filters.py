"""Prefix-based include/exclude filters for project and package names."""

from typing import FrozenSet, Iterable, Optional


def split_prefixes(value: Optional[str], strip: bool = False) -> FrozenSet[str]:
    """
    Split a comma-separated list of prefixes.

    Args:
        value: Raw list, e.g. "Microsoft.,System.".
        strip: If True, trim whitespace around each token.

    Returns:
        Set of prefixes; empty when value is None, empty or whitespace.
    """
    if value is None or not value.strip():
        return frozenset()
    tokens = value.split(",")
    if strip:
        tokens = [token.strip() for token in tokens]
    return frozenset(tokens)


class NamespaceFilter:
    """
    Decide whether a name passes an include/exclude prefix rule set.

    Matching is a case-sensitive literal ``str.startswith``. With no include
    prefixes every name passes. Otherwise a name must match an include
    prefix and must not match any exclude prefix.
    """

    def __init__(
        self,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        reject_empty: bool = False,
    ):
        self.include: FrozenSet[str] = frozenset(include)
        self.exclude: FrozenSet[str] = frozenset(exclude)
        self.reject_empty = reject_empty

    @classmethod
    def from_strings(
        cls,
        include: Optional[str] = None,
        exclude: Optional[str] = None,
        strip: bool = False,
        reject_empty: bool = False,
    ) -> "NamespaceFilter":
        return cls(
            include=split_prefixes(include, strip=strip),
            exclude=split_prefixes(exclude, strip=strip),
            reject_empty=reject_empty,
        )

    @classmethod
    def for_projects(
        cls, include: Optional[str] = None, exclude: Optional[str] = None
    ) -> "NamespaceFilter":
        """Project filter: tokens are trimmed and empty names never pass."""
        return cls.from_strings(include, exclude, strip=True, reject_empty=True)

    @classmethod
    def for_packages(
        cls, include: Optional[str] = None, exclude: Optional[str] = None
    ) -> "NamespaceFilter":
        """Package filter: tokens are taken verbatim."""
        return cls.from_strings(include, exclude)

    def includes(self, name: Optional[str]) -> bool:
        if self.reject_empty and not name:
            return False

        if not self.include:
            return True

        # Exclude overrides include.
        if not any(name.startswith(prefix) for prefix in self.include):
            return False
        return not any(name.startswith(prefix) for prefix in self.exclude)

    def __repr__(self) -> str:
        return (
            f"NamespaceFilter(include={sorted(self.include)}, "
            f"exclude={sorted(self.exclude)}, reject_empty={self.reject_empty})"
        )
