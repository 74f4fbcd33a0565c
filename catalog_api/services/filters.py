"""
Scan predicates for listing records.

A predicate is evaluated directly against stored records by the in-memory
store and rendered into a Cosmos DB SQL condition by the Cosmos store, so
both backends filter the same way.
"""
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class Predicate:
    def __call__(self, record: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def to_sql(self, alias: str = "c") -> Tuple[str, List[Dict[str, Any]]]:
        """Render as a WHERE condition plus query parameters."""
        raise NotImplementedError


class MatchAll(Predicate):
    def __call__(self, record):
        return True

    def to_sql(self, alias="c"):
        return "true", []

    def __repr__(self):
        return "MatchAll()"


class NameContains(Predicate):
    """Case-insensitive substring match on the name field."""

    def __init__(self, fragment: str, field: str = "name"):
        self.fragment = fragment
        self.field = field

    def __call__(self, record):
        value = record.get(self.field)
        if value is None:
            return False
        return self.fragment.casefold() in str(value).casefold()

    def to_sql(self, alias="c"):
        return (
            f"CONTAINS({alias}.{self.field}, @name, true)",
            [{"name": "@name", "value": self.fragment}],
        )

    def __repr__(self):
        return f"NameContains({self.fragment!r})"


class CategoryEquals(Predicate):
    def __init__(self, category: Union[str, Enum], field: str = "category"):
        self.category = category.value if isinstance(category, Enum) else category
        self.field = field

    def __call__(self, record):
        return record.get(self.field) == self.category

    def to_sql(self, alias="c"):
        return (
            f"{alias}.{self.field} = @category",
            [{"name": "@category", "value": self.category}],
        )

    def __repr__(self):
        return f"CategoryEquals({self.category!r})"


class AllOf(Predicate):
    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def __call__(self, record):
        return all(predicate(record) for predicate in self.predicates)

    def to_sql(self, alias="c"):
        clauses = []
        params = []
        for predicate in self.predicates:
            clause, clause_params = predicate.to_sql(alias)
            clauses.append(f"({clause})")
            params.extend(clause_params)
        return " AND ".join(clauses), params

    def __repr__(self):
        return f"AllOf{self.predicates!r}"


def build_predicate(
    name: Optional[str] = None, category: Optional[Union[str, Enum]] = None
) -> Predicate:
    """
    Compose the name and category filters into one predicate.

    A blank name counts as no name filter.
    """
    has_name = name is not None and name.strip() != ""
    has_category = category is not None

    if has_name and has_category:
        return AllOf(NameContains(name), CategoryEquals(category))
    if has_name:
        return NameContains(name)
    if has_category:
        return CategoryEquals(category)
    return MatchAll()
