"""
Filter Builder - Compose MongoDB query conditions from small options.

Each option is a callable that writes one or more keys into the filter
being built. Options are applied in the order given, so for two options
touching the same key the last one wins.

Usage:
    from mongo_helper.mongodb import new_filter, with_mongo_id, with_field, in_

    filter = new_filter(with_field("company_id", company_id))
    user_filter = mongo_id_filter(user.mongo_id)

    repository.update_many(
        {"_id": in_(outbound_log_ids)},
        {"is_finished": True},
    )

CAUTION: new_filter() without options returns {}, which matches every
document in the collection.
"""

from typing import Any, Callable, Dict, Iterable

from bson import ObjectId

FilterOption = Callable[[Dict[str, Any]], None]


def new_filter(*options: FilterOption) -> Dict[str, Any]:
    """
    Build a query condition from the given options.

    Args:
        *options: Filter options, applied in order

    Returns:
        The accumulated filter dict
    """
    query: Dict[str, Any] = {}
    for option in options:
        option(query)
    return query


def with_mongo_id(mongo_id: ObjectId) -> FilterOption:
    """Match the document with the given _id."""

    def apply(query: Dict[str, Any]) -> None:
        query["_id"] = mongo_id

    return apply


def with_field(name: str, value: Any) -> FilterOption:
    """Match documents where ``name`` equals ``value``."""

    def apply(query: Dict[str, Any]) -> None:
        query[name] = value

    return apply


def with_in(name: str, values: Iterable[Any]) -> FilterOption:
    """Match documents where ``name`` is any of ``values``."""
    condition = in_(values)

    def apply(query: Dict[str, Any]) -> None:
        query[name] = condition

    return apply


def mongo_id_filter(mongo_id: ObjectId) -> Dict[str, Any]:
    """
    Filter for a single document by _id.

    A query should almost always also contain a tenant field (company id,
    owner id) for additional safety.
    """
    return new_filter(with_mongo_id(mongo_id))


def in_(values: Iterable[Any]) -> Dict[str, Any]:
    """
    $in condition for the given values.

    The result is a field condition, not a root query:
        {"_id": in_(ids)}
    """
    return {"$in": list(values)}
