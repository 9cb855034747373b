"""MongoDB index management.

Each repository declares its indexes as IndexSpec entries; apply_indexes()
creates them and repairs conflicts left behind by earlier schema versions.
"""

from dataclasses import dataclass, field
from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import OperationFailure, PyMongoError

logger = getLogger(__name__)


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: list[tuple[str, int]]
    options: dict = field(default_factory=dict)


def apply_indexes(collection: Collection, specs: list[IndexSpec]) -> bool:
    """Create every index in specs. Return False if any could not be created."""
    ok = True
    for spec in specs:
        try:
            _create_or_repair(collection, spec)
        except PyMongoError as e:
            logger.error("Failed to create index", extra={
                "collection": collection.name, "index": spec.name, "error": str(e),
            })
            ok = False
    return ok


def _create_or_repair(collection: Collection, spec: IndexSpec) -> None:
    try:
        collection.create_index(spec.keys, name=spec.name, **spec.options)
        return
    except OperationFailure as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    # An index with our name but other keys, or our keys under another name
    wanted = dict(spec.keys)
    for existing_name, info in collection.index_information().items():
        if existing_name == '_id_':
            continue
        same_name = existing_name == spec.name
        same_keys = dict(info.get('key', [])) == wanted
        if same_name != same_keys:
            logger.warning("Dropping conflicting index", extra={
                "collection": collection.name, "index": existing_name,
            })
            collection.drop_index(existing_name)

    collection.create_index(spec.keys, name=spec.name, **spec.options)
    logger.info("Recreated index", extra={"collection": collection.name, "index": spec.name})


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
